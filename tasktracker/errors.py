"""Domain errors raised by services and rendered as ``{"error": message}``."""


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BadRequestError(AppError):
    """A required field is missing or malformed."""
    status_code = 400
    message = "Bad request"


class ConflictError(AppError):
    """A unique field (username, email) is already taken."""
    status_code = 400
    message = "Already exists"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field.capitalize()} already exists")


class UnauthorizedError(AppError):
    status_code = 401
    message = "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    message = "Not allowed"


class NotFoundError(AppError):
    status_code = 404
    message = "Not found"


class InternalError(AppError):
    status_code = 500

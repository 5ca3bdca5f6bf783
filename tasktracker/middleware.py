import logging

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from tasktracker.errors import UnauthorizedError
from tasktracker.utils.auth import decode_token, extract_token

logger = logging.getLogger(__name__)

TOKEN_COOKIE = "token"


class SessionMiddleware(BaseHTTPMiddleware):
    """Reject requests to protected paths unless they carry a valid token.

    The token is fully verified here (signature and expiry) and its claims are
    left on ``request.state.token_claims`` for the handlers.
    """

    def __init__(self, app, protected_prefix="/api/", public_prefixes=("/api/auth/",)):
        super().__init__(app)
        self.protected_prefix = protected_prefix
        self.public_prefixes = tuple(public_prefixes)

    def is_protected(self, path: str) -> bool:
        return path.startswith(self.protected_prefix) and not path.startswith(self.public_prefixes)

    async def dispatch(self, request, call_next):
        if not self.is_protected(request.url.path):
            return await call_next(request)

        token = extract_token(request.headers.get("authorization"), request.cookies.get(TOKEN_COOKIE))
        if not token:
            return JSONResponse(status_code=401, content={"error": "Authentication required"})
        try:
            request.state.token_claims = decode_token(token)
        except UnauthorizedError as exc:
            logger.debug("rejected %s %s: %s", request.method, request.url.path, exc.message)
            return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
        return await call_next(request)

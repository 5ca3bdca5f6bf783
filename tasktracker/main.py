import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tasktracker.config import LOG_LEVEL
from tasktracker.database import init_db
from tasktracker.errors import AppError
from tasktracker.logging_setup import setup_logging
from tasktracker.middleware import SessionMiddleware
from tasktracker.routers import auth, tasks

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)

init_db()

app = FastAPI(title="Task Tracker")

app.add_middleware(SessionMiddleware, protected_prefix="/api/", public_prefixes=("/api/auth/",))

# API routers
app.include_router(auth.router)
app.include_router(tasks.router)


@app.get("/health")
def health():
    return {"status": "ok"}


def _error(status_code, message):
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(AppError)
async def app_error_handler(request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return _error(400, "Invalid request")
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "request"
    return _error(400, f"{field}: {first.get('msg', 'invalid value')}")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


# Generic error handler: the cause is logged, never returned to the client
@app.exception_handler(Exception)
async def generic_exception_handler(request, exc):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")

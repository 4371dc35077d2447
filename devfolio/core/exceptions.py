"""
Application error taxonomy and FastAPI exception handlers.

Services raise AppError subclasses; the handlers registered here translate
every failure into the shared error envelope:

    {"success": false, "message": "...", "error": "..."}
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(AppError):
    """Missing, expired or invalid credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized"


class PermissionDeniedError(AppError):
    """Caller is authenticated but not allowed to perform the action."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(AppError):
    """Referenced record does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    """
    A uniqueness constraint rejected a write.

    Raised by repositories when a conditional insert loses a race; callers
    recover by re-reading the winning row.
    """
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InternalError(AppError):
    """Unexpected storage or programming failure."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"


def error_body(message: str, error: Optional[Any] = None) -> Dict[str, Any]:
    """Build the error envelope."""
    body: Dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Translate domain errors into the JSON error envelope."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Keep framework-raised HTTPExceptions in the same envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body and query validation failures are reported as 400."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    message = first.get("msg", "Invalid request")
    # pydantic prefixes custom validator messages with "Value error, "
    message = message.removeprefix("Value error, ")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            message,
            [
                {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")}
                for err in errors
            ],
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler for anything not translated above.

    The exception text is returned in ``error`` for client-side diagnostics.
    """
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Server error", str(exc)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all error handlers on the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

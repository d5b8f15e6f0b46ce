"""Application exceptions and FastAPI exception handlers.

Errors come in two tiers. ``SoftError`` subclasses (validation problems,
unknown users, duplicate usernames) are reported as HTTP 200 with an
``{"error": "..."}`` body, which is the contract the exercise tracker
test harness expects. Everything else is a 500 with a generic message.
"""

import uuid
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import get_logger

logger = get_logger(__name__)


class ExerciseTrackerError(Exception):
    """Base exception for the exercise tracker application."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)


class SoftError(ExerciseTrackerError):
    """Request-level failure reported in the body of a 200 response."""

    status_code = status.HTTP_200_OK


class ValidationError(SoftError):
    """Input validation errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class UserNotFoundError(SoftError):
    """User lookup by id found nothing."""

    def __init__(
        self, message: str = "User not found", user_id: Optional[str] = None
    ):
        details = {"user_id": user_id} if user_id else None
        super().__init__(message, "USER_NOT_FOUND", details)


class UserAlreadyExistsError(SoftError):
    """Username is already taken."""

    def __init__(
        self,
        message: str = "Username already exists",
        username: Optional[str] = None,
    ):
        details = {"username": username} if username else None
        super().__init__(message, "USER_ALREADY_EXISTS", details)


class DatabaseError(ExerciseTrackerError):
    """Document store failures."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DATABASE_ERROR", details)


def create_error_response(status_code: int, message: str) -> JSONResponse:
    """Create the ``{"error": message}`` response body."""
    return JSONResponse(status_code=status_code, content={"error": message})


async def exercise_tracker_exception_handler(
    request: Request, exc: ExerciseTrackerError
) -> JSONResponse:
    """Handle custom application exceptions."""
    error_id = str(uuid.uuid4())[:8]

    log = logger.info if isinstance(exc, SoftError) else logger.error
    log(
        "Application exception occurred",
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
    )

    return create_error_response(exc.status_code, exc.message)


async def starlette_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle routing-level HTTP exceptions (unknown paths, bad methods)."""
    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method,
    )

    return create_error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as soft errors."""
    errors = exc.errors()
    logger.info(
        "Validation exception occurred",
        errors=errors,
        path=request.url.path,
        method=request.method,
    )

    message = errors[0]["msg"] if errors else "Invalid request"
    return create_error_response(status.HTTP_200_OK, message)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other unhandled exceptions."""
    error_id = str(uuid.uuid4())[:8]

    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
        exc_info=True,
    )

    return create_error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred"
    )


def setup_exception_handlers(app):
    """Setup all exception handlers for the FastAPI app."""

    # Custom application exceptions
    app.add_exception_handler(ExerciseTrackerError, exercise_tracker_exception_handler)

    # HTTP exceptions
    app.add_exception_handler(StarletteHTTPException, starlette_exception_handler)

    # Validation errors
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # General exception handler (catch-all)
    app.add_exception_handler(Exception, general_exception_handler)

"""Pydantic schemas for API requests and responses.

This package contains all Pydantic models organized by domain:
- user.py: User schemas
- exercise.py: Exercise and log schemas, including log filters
- errors.py: Error response schemas

Import from this module: `from app.models.schemas import UserResponse`
"""

from app.models.schemas.user import UserCreateRequest, UserResponse
from app.models.schemas.exercise import (
    ExerciseCreateRequest,
    ExerciseResponse,
    LogEntry,
    LogFilters,
    LogResponse,
)
from app.models.schemas.errors import ErrorResponse

__all__ = [
    "UserCreateRequest",
    "UserResponse",
    "ExerciseCreateRequest",
    "ExerciseResponse",
    "LogEntry",
    "LogFilters",
    "LogResponse",
    "ErrorResponse",
]

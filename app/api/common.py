"""
Shared dependencies for the user and exercise endpoints.

Request bodies arrive either as HTML form posts or as JSON, so they are
read here into a plain mapping before being validated into the schema.
"""

from typing import Any, Dict

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError as PydanticValidationError

from app.core.db_client import get_database
from app.core.exceptions import ValidationError
from app.core.logging import get_api_logger
from app.models.schemas import ExerciseCreateRequest, UserCreateRequest
from app.services.exercise_service import ExerciseService
from app.services.user_service import UserService

logger = get_api_logger()


async def read_body(request: Request) -> Dict[str, Any]:
    """Read a JSON or form-encoded request body into a dict."""
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        raw = await request.body()
        if not raw:
            return {}
        try:
            data = await request.json()
        except ValueError:
            raise ValidationError("Invalid JSON body")
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON body")
        return data

    form = await request.form()
    return {key: value for key, value in form.items()}


def _validate(schema, body: Dict[str, Any]):
    try:
        return schema.model_validate(body)
    except PydanticValidationError as e:
        logger.info("Request body rejected", errors=e.errors(include_url=False))
        raise ValidationError("Invalid request body")


async def get_user_create_request(
    body: Dict[str, Any] = Depends(read_body),
) -> UserCreateRequest:
    """Validate the body of a create-user request."""
    return _validate(UserCreateRequest, body)


async def get_exercise_create_request(
    body: Dict[str, Any] = Depends(read_body),
) -> ExerciseCreateRequest:
    """Validate the body of an add-exercise request."""
    return _validate(ExerciseCreateRequest, body)


def get_user_service(
    database: AsyncIOMotorDatabase = Depends(get_database),
) -> UserService:
    return UserService(database)


def get_exercise_service(
    database: AsyncIOMotorDatabase = Depends(get_database),
) -> ExerciseService:
    return ExerciseService(database)

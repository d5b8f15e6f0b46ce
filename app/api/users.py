from typing import List

from fastapi import APIRouter, Depends

from app.api.common import get_user_create_request, get_user_service
from app.core.exceptions import DatabaseError, ExerciseTrackerError
from app.core.logging import get_service_logger
from app.models.schemas import ErrorResponse, UserCreateRequest, UserResponse
from app.services.user_service import UserService

logger = get_service_logger("user_api")

router = APIRouter()


@router.post(
    "/users",
    response_model=UserResponse,
    summary="Create User",
    operation_id="createUser",
    description="""Create a new user.

Accepts a form post or JSON body with a `username`. An empty or
already-taken username is answered with HTTP 200 and an `error` field.""",
    responses={
        200: {"description": "User created, or `{error}` on invalid input"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
)
async def create_user(
    user: UserCreateRequest = Depends(get_user_create_request),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    try:
        logger.info("Creating user", username=user.username)
        return await user_service.create_user(user.username)

    except ExerciseTrackerError:
        raise
    except Exception as e:
        logger.error("Failed to create user", username=user.username, error=str(e))
        raise DatabaseError("Error creating user")


@router.get(
    "/users",
    response_model=List[UserResponse],
    summary="List Users",
    operation_id="listUsers",
    description="List every user as `{username, _id}`.",
    responses={
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
)
async def list_users(
    user_service: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    try:
        return await user_service.list_users()

    except ExerciseTrackerError:
        raise
    except Exception as e:
        logger.error("Failed to list users", error=str(e))
        raise DatabaseError("Error fetching users")

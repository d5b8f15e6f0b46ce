from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from app.api.common import get_exercise_create_request, get_exercise_service
from app.core.exceptions import DatabaseError, ExerciseTrackerError
from app.core.logging import get_service_logger
from app.models.schemas import (
    ErrorResponse,
    ExerciseCreateRequest,
    ExerciseResponse,
    LogFilters,
    LogResponse,
)
from app.services.exercise_service import ExerciseService

logger = get_service_logger("exercise_api")

router = APIRouter()


@router.post(
    "/users/{user_id}/exercises",
    response_model=ExerciseResponse,
    summary="Add Exercise",
    operation_id="addExercise",
    description="""Log an exercise for a user.

`description` and `duration` (whole minutes) are required. `date` is
optional (`YYYY-MM-DD`) and defaults to today. Missing fields, a bad
date or an unknown user id are answered with HTTP 200 and an `error`
field.""",
    responses={
        200: {"description": "Exercise logged, or `{error}` on invalid input"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
)
async def add_exercise(
    user_id: str = Path(..., description="User ID"),
    exercise: ExerciseCreateRequest = Depends(get_exercise_create_request),
    exercise_service: ExerciseService = Depends(get_exercise_service),
) -> ExerciseResponse:
    try:
        return await exercise_service.add_exercise(user_id, exercise)

    except ExerciseTrackerError:
        raise
    except Exception as e:
        logger.error("Failed to add exercise", user_id=user_id, error=str(e))
        raise DatabaseError("Error adding exercise")


@router.get(
    "/users/{user_id}/logs",
    response_model=LogResponse,
    summary="Get Exercise Log",
    operation_id="getExerciseLog",
    description="""Get a user's exercises sorted by date, oldest first.

`from` and `to` are inclusive `YYYY-MM-DD` bounds; `limit` keeps the
first N entries. `count` is the number of entries returned.""",
    responses={
        200: {"description": "Exercise log, or `{error}` on invalid input"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
)
async def get_logs(
    user_id: str = Path(..., description="User ID"),
    date_from: Optional[str] = Query(None, alias="from", description="Earliest date"),
    date_to: Optional[str] = Query(None, alias="to", description="Latest date"),
    limit: Optional[str] = Query(None, description="Maximum number of entries"),
    exercise_service: ExerciseService = Depends(get_exercise_service),
) -> LogResponse:
    try:
        filters = LogFilters.from_query(date_from, date_to, limit)
        return await exercise_service.get_logs(user_id, filters)

    except ExerciseTrackerError:
        raise
    except Exception as e:
        logger.error("Failed to fetch logs", user_id=user_id, error=str(e))
        raise DatabaseError("Error fetching logs")

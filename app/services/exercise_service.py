from typing import Optional, Union

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from app.core.db_client import EXERCISES_COLLECTION
from app.core.exceptions import ValidationError
from app.core.logging import get_service_logger
from app.models.exercise import Exercise
from app.models.schemas import (
    ExerciseCreateRequest,
    ExerciseResponse,
    LogEntry,
    LogFilters,
    LogResponse,
)
from app.services.user_service import UserService
from app.utils.dates import InvalidDateError, format_date, parse_date, today

logger = get_service_logger("exercise")


# Durations are stored as BSON int64
MIN_DURATION = -(2**63)
MAX_DURATION = 2**63 - 1


def coerce_duration(value: Union[int, float, str]) -> int:
    """
    Convert a submitted duration to whole minutes.

    Integral floats and their string forms ("30", "30.0") are accepted;
    fractional, non-numeric or out-of-range values are not.

    Raises:
        ValidationError: If the value is not a whole number that fits in int64
    """
    if isinstance(value, bool):
        raise ValidationError("Duration must be a number")

    if isinstance(value, int):
        number = value
    else:
        try:
            parsed = float(str(value).strip())
        except ValueError:
            raise ValidationError("Duration must be a number")
        if not parsed.is_integer():
            raise ValidationError("Duration must be a number")
        number = int(parsed)

    if not MIN_DURATION <= number <= MAX_DURATION:
        raise ValidationError("Duration must be a number")
    return number


class ExerciseService:
    """Service for logging exercises and reading exercise logs."""

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        user_service: Optional[UserService] = None,
    ):
        self.collection = database[EXERCISES_COLLECTION]
        self.user_service = user_service or UserService(database)
        self.logger = logger

    async def add_exercise(
        self, user_id: str, exercise_data: ExerciseCreateRequest
    ) -> ExerciseResponse:
        """
        Log an exercise for a user.

        Args:
            user_id: Id of the owning user
            exercise_data: Submitted description, duration and optional date

        Returns:
            The stored exercise together with the user's name and id

        Raises:
            ValidationError: If description or duration is missing, duration
                is not a whole number, or date cannot be parsed
            UserNotFoundError: If the user does not exist
        """
        description = (exercise_data.description or "").strip()
        raw_duration = exercise_data.duration
        if isinstance(raw_duration, str):
            raw_duration = raw_duration.strip()
        if not description or raw_duration is None or raw_duration == "":
            raise ValidationError("Description and duration are required")

        duration = coerce_duration(raw_duration)

        if exercise_data.date and exercise_data.date.strip():
            try:
                exercise_date = parse_date(exercise_data.date)
            except InvalidDateError:
                raise ValidationError("Invalid date")
        else:
            exercise_date = today()

        user = await self.user_service.get_user(user_id)

        exercise = Exercise(
            user_id=user.id,
            description=description,
            duration=duration,
            date=exercise_date,
        )
        result = await self.collection.insert_one(exercise.to_dict())
        exercise.id = str(result.inserted_id)

        self.logger.info(
            "Exercise logged",
            user_id=user.id,
            exercise_id=exercise.id,
            date=exercise.date.isoformat(),
        )

        return ExerciseResponse(
            username=user.username,
            description=exercise.description,
            duration=exercise.duration,
            date=format_date(exercise.date),
            _id=user.id,
        )

    async def get_logs(self, user_id: str, filters: LogFilters) -> LogResponse:
        """
        Get a user's exercise log, oldest first.

        Args:
            user_id: Id of the user
            filters: Optional inclusive date bounds and entry limit

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = await self.user_service.get_user(user_id)

        query = filters.to_query(ObjectId(user.id))
        cursor = self.collection.find(
            query, {"description": 1, "duration": 1, "date": 1, "userId": 1}
        ).sort([("date", ASCENDING), ("_id", ASCENDING)])
        if filters.limit:
            cursor = cursor.limit(filters.limit)

        documents = await cursor.to_list(length=None)
        log = [
            LogEntry(
                description=exercise.description,
                duration=exercise.duration,
                date=format_date(exercise.date),
            )
            for exercise in (Exercise.from_dict(doc) for doc in documents)
        ]

        return LogResponse(username=user.username, count=len(log), _id=user.id, log=log)

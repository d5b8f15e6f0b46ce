"""Exercise and exercise-log schemas for API requests and responses."""

from datetime import date
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from app.core.exceptions import ValidationError
from app.utils.dates import InvalidDateError, parse_optional_date, to_storage


class ExerciseCreateRequest(BaseModel):
    """Body of ``POST /api/users/{_id}/exercises``.

    Fields stay loosely typed; the service decides what is missing or
    malformed so it can answer with a soft error.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    description: Optional[str] = Field(None, examples=["push ups"])
    duration: Optional[Union[int, float, str]] = Field(
        None, description="Duration in minutes", examples=[30]
    )
    date: Optional[str] = Field(
        None,
        description="Exercise date, YYYY-MM-DD (defaults to today)",
        examples=["2024-01-01"],
    )


class ExerciseResponse(BaseModel):
    """A newly logged exercise, keyed by the owning user's id."""

    model_config = ConfigDict(populate_by_name=True)

    username: str
    description: str
    duration: int
    date: str = Field(..., examples=["Mon Jan 01 2024"])
    id: str = Field(..., alias="_id", description="User id")


class LogEntry(BaseModel):
    """One exercise in a user's log."""

    description: str
    duration: int
    date: str = Field(..., examples=["Mon Jan 01 2024"])


class LogResponse(BaseModel):
    """A user's exercise log."""

    model_config = ConfigDict(populate_by_name=True)

    username: str
    count: int = Field(..., description="Number of entries in log")
    id: str = Field(..., alias="_id", description="User id")
    log: List[LogEntry] = Field(default_factory=list)


class LogFilters(BaseModel):
    """Optional filters for a log query; ``None`` means unbounded."""

    date_from: Optional[date] = Field(None, description="Inclusive lower bound")
    date_to: Optional[date] = Field(None, description="Inclusive upper bound")
    limit: Optional[int] = Field(None, ge=1, description="Maximum entries returned")

    @classmethod
    def from_query(
        cls,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> "LogFilters":
        """Build filters from raw query-string values.

        Raises:
            ValidationError: If a bound is not a date or limit is not a
                positive integer
        """
        try:
            lower = parse_optional_date(date_from)
            upper = parse_optional_date(date_to)
        except InvalidDateError:
            raise ValidationError("Invalid date")

        max_entries = None
        if limit is not None and str(limit).strip():
            try:
                max_entries = int(str(limit).strip())
            except ValueError:
                raise ValidationError("Invalid limit")
            if max_entries < 1:
                raise ValidationError("Invalid limit")

        return cls(date_from=lower, date_to=upper, limit=max_entries)

    def to_query(self, user_id: ObjectId) -> Dict[str, Any]:
        """Build the ``exercises`` collection filter for a user."""
        query: Dict[str, Any] = {"userId": user_id}

        date_range: Dict[str, Any] = {}
        if self.date_from is not None:
            date_range["$gte"] = to_storage(self.date_from)
        if self.date_to is not None:
            date_range["$lte"] = to_storage(self.date_to)
        if date_range:
            query["date"] = date_range

        return query

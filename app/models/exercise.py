import datetime as dt
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, Field

from app.utils.dates import from_storage, to_storage


class Exercise(BaseModel):
    """Exercise record as kept in the ``exercises`` collection."""

    id: Optional[str] = Field(None, description="Store-generated exercise identifier")
    user_id: str = Field(..., description="Owning user id")
    description: str = Field(..., description="What was done")
    duration: int = Field(..., description="Duration in minutes")
    date: dt.date = Field(..., description="Calendar date of the exercise")

    def __repr__(self) -> str:
        return (
            f"<Exercise(id={self.id}, user_id={self.user_id}, "
            f"description='{self.description}', date={self.date})>"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert exercise to a document for insertion."""
        return {
            "userId": ObjectId(self.user_id),
            "description": self.description,
            "duration": self.duration,
            "date": to_storage(self.date),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Exercise":
        """Create Exercise from a stored document."""
        duration = data["duration"]
        # Older records may hold fractional minutes
        if isinstance(duration, float):
            duration = round(duration)
        return cls(
            id=str(data["_id"]) if data.get("_id") is not None else None,
            user_id=str(data["userId"]),
            description=data["description"],
            duration=duration,
            date=from_storage(data["date"]),
        )

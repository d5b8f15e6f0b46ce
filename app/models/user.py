from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """User record as kept in the ``users`` collection."""

    id: Optional[str] = Field(None, description="Store-generated user identifier")
    username: str = Field(..., description="Unique username")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"

    def to_dict(self) -> Dict[str, Any]:
        """Convert user to a document for insertion."""
        return self.model_dump(exclude={"id"})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Create User from a stored document."""
        return cls(id=str(data["_id"]), username=data["username"])

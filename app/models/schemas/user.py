"""User schemas for API requests and responses."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserCreateRequest(BaseModel):
    """Body of ``POST /api/users``."""

    username: Optional[str] = Field(None, description="Username", examples=["fcc_test"])

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class UserResponse(BaseModel):
    """A user as returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., examples=["fcc_test"])
    id: str = Field(
        ...,
        alias="_id",
        description="User id",
        examples=["5fb5853f734231456ccb3b05"],
    )

"""Error response schemas for OpenAPI documentation."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body shared by soft errors (200) and server errors (500)."""

    error: str = Field(
        ...,
        description="Human-readable error message",
        examples=["User not found"],
    )

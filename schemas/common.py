"""Schemas shared across routers."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    detail: str = Field(
        description="Error message",
    )
    error_code: str | None = Field(
        default=None,
        description="Optional error code for client handling",
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement for deletes and similar operations."""

    message: str

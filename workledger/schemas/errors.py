"""Shared error response schemas for the workledger API."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class NotFoundErrorResponse(BaseModel):
    """Response returned when a resource is not found (HTTP 404)."""

    detail: str = Field(
        ...,
        description="Error message describing what was not found",
        json_schema_extra={"example": "Task not found"},
    )


class ConflictErrorResponse(BaseModel):
    """Response returned when a task transition collides with the active task (HTTP 409)."""

    detail: str = Field(
        ...,
        description="Error message describing the conflict",
        json_schema_extra={
            "example": (
                "Only one task can be in progress for this client. "
                '"Fix login" is already active.'
            )
        },
    )
    blocking_task_id: Optional[UUID] = Field(None, description="Task currently in progress")
    blocking_task_title: Optional[str] = Field(None, description="Title of the blocking task")


class BadRequestErrorResponse(BaseModel):
    """Response returned when a request fails domain validation (HTTP 400)."""

    detail: str = Field(..., description="Error message describing the invalid input")

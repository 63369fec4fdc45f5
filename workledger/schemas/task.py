"""Task schemas."""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from workledger.core.shared_models import TaskPriority, TaskStatus

_NON_NULLABLE = ("title", "priority", "status")


class TaskSubmit(BaseModel):
    """Client-facing task submission. New tasks always start queued."""

    model_config = ConfigDict(str_strip_whitespace=True)

    client_id: UUID
    title: str = Field(..., min_length=3)
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM


class TaskCreate(TaskSubmit):
    """Administrative task creation; may start in any status."""

    status: TaskStatus = TaskStatus.QUEUED
    est_hours: Optional[int] = Field(None, ge=0)
    assigned_dev_id: Optional[UUID] = None


class TaskUpdate(BaseModel):
    """Partial update of a task.

    Only fields explicitly provided are applied. An update with no fields at
    all is rejected by the task state machine.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    est_hours: Optional[int] = Field(None, ge=0)
    hours_spent: Optional[float] = Field(None, ge=0)
    assigned_dev_id: Optional[UUID] = None

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "TaskUpdate":
        for name in _NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller set, with enums unwrapped to strings."""
        return {
            name: value.value if isinstance(value, Enum) else value
            for name, value in self.model_dump(exclude_unset=True).items()
        }


class Task(BaseModel):
    """Task as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: UUID
    title: str
    description: Optional[str] = None
    priority: TaskPriority
    status: TaskStatus
    est_hours: Optional[int] = None
    hours_spent: Optional[float] = None
    assigned_dev_id: Optional[UUID] = None
    position: int
    created_at: datetime
    completed_at: Optional[datetime] = None


class TaskReorderItem(BaseModel):
    """One ``(task, position)`` pair of a reorder batch."""

    id: UUID
    position: int = Field(..., ge=0)


class TaskReorderRequest(BaseModel):
    """Batch reorder scoped to one ``(client_id, status)`` partition."""

    client_id: UUID
    status: TaskStatus
    order: List[TaskReorderItem]


class TaskReorderResponse(BaseModel):
    """Result of a reorder batch."""

    ok: bool = True
    updated: int

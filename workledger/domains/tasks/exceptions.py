"""Tasks domain exceptions."""

from typing import Optional
from uuid import UUID

from workledger.core.exceptions import BadRequestError, ConflictError, NotFoundException


class TaskNotFoundError(NotFoundException):
    """Raised when a task does not exist."""

    def __init__(self, task_id: UUID) -> None:
        """Initialize with the missing task ID."""
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class EmptyTaskUpdateError(BadRequestError):
    """Raised when an update carries no fields."""

    def __init__(self) -> None:
        """Initialize with a fixed message."""
        super().__init__("No fields to update")


class ActiveTaskConflictError(ConflictError):
    """Raised when a client already has a task in progress."""

    def __init__(
        self,
        blocking_task_id: Optional[UUID] = None,
        blocking_task_title: Optional[str] = None,
    ) -> None:
        """Initialize with the task that holds the in-progress slot."""
        self.blocking_task_id = blocking_task_id
        self.blocking_task_title = blocking_task_title
        if blocking_task_title:
            message = (
                "Only one task can be in progress for this client. "
                f'"{blocking_task_title}" is already active.'
            )
        else:
            message = "Only one task can be in progress for this client."
        super().__init__(message)


class ReorderIntegrityError(BadRequestError):
    """Raised when a reorder batch does not match the partition it targets.

    Nothing is written when this is raised.
    """

    def __init__(self, message: str, task_ids: Optional[list[UUID]] = None) -> None:
        """Initialize with the reason and the offending task IDs."""
        self.task_ids = task_ids or []
        super().__init__(message)

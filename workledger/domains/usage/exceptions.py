"""Usage domain exceptions."""

from typing import Optional
from uuid import UUID

from workledger.core.exceptions import BadRequestError


class InvalidHoursError(BadRequestError):
    """Raised when a ledger entry would carry zero or negative hours."""

    def __init__(self, hours: Optional[float]) -> None:
        """Initialize with the rejected value."""
        self.hours = hours
        super().__init__(f"Hours must be greater than 0, got {hours}")


class TaskClientMismatchError(BadRequestError):
    """Raised when hours are logged against a task of another client."""

    def __init__(self, task_id: UUID, client_id: UUID) -> None:
        """Initialize with the task and the client it was logged for."""
        self.task_id = task_id
        self.client_id = client_id
        super().__init__(f"Task {task_id} does not belong to client {client_id}")

"""Tasks domain protocols.

TaskServiceProtocol: the only thing task endpoints need injected.
TaskSequencerProtocol: positions within a ``(client, status)`` partition.
TaskStateMachineProtocol: status transitions under the single-active rule.
"""

from typing import List, Optional, Protocol, Sequence, runtime_checkable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.core.context import BaseContext
from workledger.core.shared_models import TaskStatus
from workledger.models import Task


@runtime_checkable
class TaskSequencerProtocol(Protocol):
    """Assigns and validates ordinal positions."""

    async def next_position(self, db: AsyncSession, client_id: UUID, status: TaskStatus) -> int:
        """Position at the end of a partition."""
        ...

    async def reorder(
        self,
        db: AsyncSession,
        client_id: UUID,
        status: TaskStatus,
        order: Sequence[schemas.TaskReorderItem],
    ) -> int:
        """Apply a batch of positions atomically. Returns the number of tasks moved."""
        ...


@runtime_checkable
class TaskStateMachineProtocol(Protocol):
    """Validates and applies status transitions."""

    async def transition(
        self, db: AsyncSession, task_id: UUID, update: schemas.TaskUpdate, ctx: BaseContext
    ) -> Task:
        """Apply a partial update, including an optional status change."""
        ...

    async def create(
        self, db: AsyncSession, obj_in: schemas.TaskCreate, ctx: BaseContext
    ) -> Task:
        """Insert a task in any initial status."""
        ...


@runtime_checkable
class TaskServiceProtocol(Protocol):
    """Public task interface used by the API."""

    async def submit(self, db: AsyncSession, obj_in: schemas.TaskSubmit, ctx: BaseContext) -> Task:
        """Create a queued task at the end of the queue."""
        ...

    async def create(self, db: AsyncSession, obj_in: schemas.TaskCreate, ctx: BaseContext) -> Task:
        """Administrative creation in any status."""
        ...

    async def update(
        self, db: AsyncSession, task_id: UUID, update: schemas.TaskUpdate, ctx: BaseContext
    ) -> Task:
        """Partial update with an optional status transition."""
        ...

    async def reorder(
        self, db: AsyncSession, request: schemas.TaskReorderRequest, ctx: BaseContext
    ) -> int:
        """Reorder one partition."""
        ...

    async def list_for_client(
        self,
        db: AsyncSession,
        client_id: UUID,
        ctx: BaseContext,
        status: Optional[TaskStatus] = None,
    ) -> List[Task]:
        """Tasks of a client in display order."""
        ...

    async def delete(self, db: AsyncSession, task_id: UUID, ctx: BaseContext) -> None:
        """Hard-delete a task."""
        ...

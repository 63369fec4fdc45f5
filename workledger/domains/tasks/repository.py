"""Task repository."""

from typing import Any, List, Optional, Protocol, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workledger import crud
from workledger.db.unit_of_work import UnitOfWork
from workledger.models import Task
from workledger.models.task import ONE_ACTIVE_TASK_INDEX


def is_single_active_violation(exc: IntegrityError) -> bool:
    """Whether *exc* was raised by the one-in-progress-per-client index.

    The driver reports the violated index by name in its message.
    """
    return ONE_ACTIVE_TASK_INDEX in str(exc.orig)


class TaskRepositoryProtocol(Protocol):
    """Data access for tasks."""

    async def get(self, db: AsyncSession, task_id: UUID) -> Optional[Task]:
        """Get a task by ID."""
        ...

    async def get_for_update(self, db: AsyncSession, task_id: UUID) -> Optional[Task]:
        """Get a fresh copy of a task, locking its row for the current transaction."""
        ...

    async def get_in_progress(
        self, db: AsyncSession, *, client_id: UUID, exclude_id: Optional[UUID] = None
    ) -> Optional[Task]:
        """Get the client's in-progress task other than *exclude_id*."""
        ...

    async def get_by_client(
        self, db: AsyncSession, *, client_id: UUID, status: Optional[str] = None
    ) -> List[Task]:
        """Get a client's tasks, optionally limited to one status."""
        ...

    async def get_max_position(
        self, db: AsyncSession, *, client_id: UUID, status: str
    ) -> Optional[int]:
        """Highest position in a partition, None when it is empty."""
        ...

    async def create(
        self, db: AsyncSession, *, values: dict[str, Any], uow: Optional[UnitOfWork] = None
    ) -> Task:
        """Insert a task."""
        ...

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: Task,
        values: dict[str, Any],
        uow: Optional[UnitOfWork] = None,
    ) -> Task:
        """Set fields on a task."""
        ...

    async def set_positions(
        self,
        db: AsyncSession,
        *,
        positions: Sequence[tuple[UUID, int]],
        uow: Optional[UnitOfWork] = None,
    ) -> int:
        """Write many positions at once."""
        ...

    async def add_hours_spent(
        self,
        db: AsyncSession,
        *,
        task_id: UUID,
        hours: float,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Increment a task's cached ``hours_spent``."""
        ...

    async def remove(self, db: AsyncSession, *, task_id: UUID) -> bool:
        """Hard-delete a task."""
        ...


class TaskRepository(TaskRepositoryProtocol):
    """Delegates to the crud.task singleton."""

    async def get(self, db: AsyncSession, task_id: UUID) -> Optional[Task]:
        """Get a task by ID."""
        return await crud.task.get(db, task_id)

    async def get_for_update(self, db: AsyncSession, task_id: UUID) -> Optional[Task]:
        """Get a fresh copy of a task, locking its row for the current transaction."""
        return await crud.task.get_for_update(db, task_id)

    async def get_in_progress(
        self, db: AsyncSession, *, client_id: UUID, exclude_id: Optional[UUID] = None
    ) -> Optional[Task]:
        """Get the client's in-progress task other than *exclude_id*."""
        return await crud.task.get_in_progress(db, client_id=client_id, exclude_id=exclude_id)

    async def get_by_client(
        self, db: AsyncSession, *, client_id: UUID, status: Optional[str] = None
    ) -> List[Task]:
        """Get a client's tasks, optionally limited to one status."""
        return await crud.task.get_by_client(db, client_id=client_id, status=status)

    async def get_max_position(
        self, db: AsyncSession, *, client_id: UUID, status: str
    ) -> Optional[int]:
        """Highest position in a partition, None when it is empty."""
        return await crud.task.get_max_position(db, client_id=client_id, status=status)

    async def create(
        self, db: AsyncSession, *, values: dict[str, Any], uow: Optional[UnitOfWork] = None
    ) -> Task:
        """Insert a task."""
        return await crud.task.create(db, obj_in=values, uow=uow)

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: Task,
        values: dict[str, Any],
        uow: Optional[UnitOfWork] = None,
    ) -> Task:
        """Set fields on a task."""
        return await crud.task.update(db, db_obj=db_obj, obj_in=values, uow=uow)

    async def set_positions(
        self,
        db: AsyncSession,
        *,
        positions: Sequence[tuple[UUID, int]],
        uow: Optional[UnitOfWork] = None,
    ) -> int:
        """Write many positions at once."""
        return await crud.task.set_positions(db, positions=positions, uow=uow)

    async def add_hours_spent(
        self,
        db: AsyncSession,
        *,
        task_id: UUID,
        hours: float,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Increment a task's cached ``hours_spent``."""
        await crud.task.add_hours_spent(db, task_id=task_id, hours=hours, uow=uow)

    async def remove(self, db: AsyncSession, *, task_id: UUID) -> bool:
        """Hard-delete a task."""
        return await crud.task.remove(db, id=task_id)

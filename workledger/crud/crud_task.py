"""CRUD operations for Task model."""

from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from workledger.crud._base import CRUDBase
from workledger.db.unit_of_work import UnitOfWork
from workledger.models.task import Task
from workledger.schemas.task import TaskCreate, TaskUpdate


class CRUDTask(CRUDBase[Task, TaskCreate, TaskUpdate]):
    """CRUD operations for Task model."""

    async def get_in_progress(
        self,
        db: AsyncSession,
        *,
        client_id: UUID,
        exclude_id: Optional[UUID] = None,
    ) -> Optional[Task]:
        """Get the client's in-progress task, ignoring *exclude_id*."""
        query = select(Task).where(Task.client_id == client_id, Task.status == "in_progress")
        if exclude_id is not None:
            query = query.where(Task.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def get_max_position(
        self, db: AsyncSession, *, client_id: UUID, status: str
    ) -> Optional[int]:
        """Highest position in a ``(client, status)`` partition, or None if empty."""
        result = await db.execute(
            select(func.max(Task.position)).where(
                Task.client_id == client_id, Task.status == status
            )
        )
        return result.scalar_one_or_none()

    async def get_by_client(
        self, db: AsyncSession, *, client_id: UUID, status: Optional[str] = None
    ) -> List[Task]:
        """Get a client's tasks, optionally in one status."""
        query = select(Task).where(Task.client_id == client_id)
        if status is not None:
            query = query.where(Task.status == status)
        result = await db.execute(query.order_by(Task.position))
        return list(result.scalars().all())

    async def set_positions(
        self,
        db: AsyncSession,
        *,
        positions: Sequence[tuple[UUID, int]],
        uow: Optional[UnitOfWork] = None,
    ) -> int:
        """Write new positions for many tasks in a single bulk UPDATE."""
        if not positions:
            return 0
        await db.execute(
            update(Task),
            [{"id": task_id, "position": position} for task_id, position in positions],
        )
        await self._persist(db, uow)
        return len(positions)

    async def add_hours_spent(
        self,
        db: AsyncSession,
        *,
        task_id: UUID,
        hours: float,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Increment the cached ``hours_spent`` on a task."""
        await db.execute(
            update(Task)
            .where(Task.id == task_id)
            .values(hours_spent=func.coalesce(Task.hours_spent, 0) + hours)
        )
        await self._persist(db, uow)


task = CRUDTask(Task)

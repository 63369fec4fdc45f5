"""Fake task repository for testing."""

import asyncio
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workledger.models import Task


class FakeTaskRepository:
    """In-memory fake for TaskRepositoryProtocol.

    Read methods yield to the event loop once so concurrent callers interleave
    the way they would against a real database.
    """

    def __init__(self) -> None:
        """Initialize with empty store and call log."""
        self._store: dict[UUID, Task] = {}
        self._calls: list[tuple] = []
        self._update_error: Optional[IntegrityError] = None

    def seed(self, *tasks: Task) -> None:
        """Populate store with test data."""
        for task in tasks:
            self._store[task.id] = task

    def fail_next_update(self, exc: IntegrityError) -> None:
        """Raise *exc* from the next ``update`` call, as a lost race would."""
        self._update_error = exc

    def all(self) -> List[Task]:
        """Every stored task."""
        return list(self._store.values())

    async def get(self, db: AsyncSession, task_id: UUID) -> Optional[Task]:
        """Get a task by ID."""
        self._calls.append(("get", task_id))
        await asyncio.sleep(0)
        return self._store.get(task_id)

    async def get_for_update(self, db: AsyncSession, task_id: UUID) -> Optional[Task]:
        """Get a task by ID (no row locking in memory)."""
        self._calls.append(("get_for_update", task_id))
        await asyncio.sleep(0)
        return self._store.get(task_id)

    async def get_in_progress(
        self, db: AsyncSession, *, client_id: UUID, exclude_id: Optional[UUID] = None
    ) -> Optional[Task]:
        """Get the client's in-progress task other than *exclude_id*."""
        self._calls.append(("get_in_progress", client_id, exclude_id))
        await asyncio.sleep(0)
        for task in self._store.values():
            if (
                task.client_id == client_id
                and task.status == "in_progress"
                and task.id != exclude_id
            ):
                return task
        return None

    async def get_by_client(
        self, db: AsyncSession, *, client_id: UUID, status: Optional[str] = None
    ) -> List[Task]:
        """Get a client's tasks, optionally in one status."""
        self._calls.append(("get_by_client", client_id, status))
        tasks = [
            t
            for t in self._store.values()
            if t.client_id == client_id and (status is None or t.status == status)
        ]
        return sorted(tasks, key=lambda t: t.position)

    async def get_max_position(
        self, db: AsyncSession, *, client_id: UUID, status: str
    ) -> Optional[int]:
        """Highest position in a partition."""
        self._calls.append(("get_max_position", client_id, status))
        positions = [
            t.position
            for t in self._store.values()
            if t.client_id == client_id and t.status == status
        ]
        return max(positions) if positions else None

    async def create(
        self, db: AsyncSession, *, values: dict[str, Any], uow: object = None
    ) -> Task:
        """Insert a task (fake)."""
        self._calls.append(("create", values, uow))
        now = datetime.now(timezone.utc)
        task = Task(id=uuid4(), created_at=now, modified_at=now, hours_spent=None, **values)
        self._store[task.id] = task
        return task

    async def update(
        self, db: AsyncSession, *, db_obj: Task, values: dict[str, Any], uow: object = None
    ) -> Task:
        """Set fields on a task (fake)."""
        self._calls.append(("update", db_obj.id, dict(values), uow))
        if self._update_error is not None:
            exc, self._update_error = self._update_error, None
            raise exc
        for key, value in values.items():
            setattr(db_obj, key, value)
        return db_obj

    async def set_positions(
        self, db: AsyncSession, *, positions: Sequence[tuple[UUID, int]], uow: object = None
    ) -> int:
        """Write many positions (fake)."""
        self._calls.append(("set_positions", list(positions), uow))
        for task_id, position in positions:
            self._store[task_id].position = position
        return len(positions)

    async def add_hours_spent(
        self, db: AsyncSession, *, task_id: UUID, hours: float, uow: object = None
    ) -> None:
        """Increment cached hours (fake)."""
        self._calls.append(("add_hours_spent", task_id, hours))
        task = self._store[task_id]
        task.hours_spent = (task.hours_spent or 0) + hours

    async def remove(self, db: AsyncSession, *, task_id: UUID) -> bool:
        """Hard-delete a task (fake)."""
        self._calls.append(("remove", task_id))
        return self._store.pop(task_id, None) is not None

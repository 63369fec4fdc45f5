"""Fake usage log repository for testing."""

from datetime import datetime, timezone
from typing import Any, List, Optional
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from workledger.models import UsageLog


class FakeUsageLogRepository:
    """In-memory fake for UsageLogRepositoryProtocol."""

    def __init__(self) -> None:
        """Initialize with empty store and call log."""
        self._store: list[UsageLog] = []
        self._calls: list[tuple] = []
        self._create_error: Optional[Exception] = None

    def seed(
        self,
        client_id: UUID,
        hours: float,
        logged_at: datetime,
        task_id: Optional[UUID] = None,
    ) -> UsageLog:
        """Add an entry with an explicit timestamp."""
        entry = UsageLog(
            id=uuid4(), client_id=client_id, task_id=task_id, hours=hours, logged_at=logged_at
        )
        self._store.append(entry)
        return entry

    def fail_next_create(self, exc: Exception) -> None:
        """Raise *exc* from the next ``create`` call."""
        self._create_error = exc

    def entries(self, client_id: Optional[UUID] = None) -> List[UsageLog]:
        """Stored entries, optionally for one client."""
        return [e for e in self._store if client_id is None or e.client_id == client_id]

    async def create(
        self, db: AsyncSession, *, values: dict[str, Any], uow: object = None
    ) -> UsageLog:
        """Insert an entry (fake)."""
        self._calls.append(("create", values, uow))
        if self._create_error is not None:
            exc, self._create_error = self._create_error, None
            raise exc
        entry = UsageLog(id=uuid4(), **{"logged_at": datetime.now(timezone.utc), **values})
        self._store.append(entry)
        return entry

    async def sum_hours(
        self, db: AsyncSession, *, client_id: UUID, start: datetime, end: datetime
    ) -> float:
        """Total hours in ``[start, end)``."""
        self._calls.append(("sum_hours", client_id, start, end))
        return float(
            sum(
                e.hours
                for e in self._store
                if e.client_id == client_id and start <= e.logged_at < end
            )
        )

    async def totals_since(
        self, db: AsyncSession, *, since: datetime
    ) -> List[tuple[UUID, float, int]]:
        """Per-client totals since *since*."""
        self._calls.append(("totals_since", since))
        hours: dict[UUID, float] = {}
        tasks: dict[UUID, set] = {}
        for e in self._store:
            if e.logged_at < since:
                continue
            hours[e.client_id] = hours.get(e.client_id, 0.0) + e.hours
            bucket = tasks.setdefault(e.client_id, set())
            if e.task_id is not None:
                bucket.add(e.task_id)
        return [(cid, total, len(tasks[cid])) for cid, total in hours.items()]

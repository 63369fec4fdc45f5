"""Fake usage ledger for testing."""

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from workledger.models import UsageLog


class FakeUsageLedger:
    """In-memory fake for UsageLedgerProtocol that records appends."""

    def __init__(self) -> None:
        """Initialize with no appends."""
        self.appends: list[dict] = []
        self._error: Optional[Exception] = None

    def fail_with(self, exc: Exception) -> None:
        """Raise *exc* from every subsequent ``append``."""
        self._error = exc

    async def append(
        self,
        db: AsyncSession,
        *,
        client_id: UUID,
        hours: float,
        task_id: Optional[UUID] = None,
        logged_by: Optional[UUID] = None,
        increment_task: bool = True,
    ) -> UsageLog:
        """Record the append."""
        if self._error is not None:
            raise self._error
        record = {
            "client_id": client_id,
            "hours": hours,
            "task_id": task_id,
            "logged_by": logged_by,
            "increment_task": increment_task,
        }
        self.appends.append(record)
        return UsageLog(
            id=uuid4(), client_id=client_id, task_id=task_id, hours=hours, logged_by=logged_by
        )

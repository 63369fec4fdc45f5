"""Usage log repository."""

from datetime import datetime
from typing import Any, List, Optional, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import crud
from workledger.db.unit_of_work import UnitOfWork
from workledger.models import UsageLog


class UsageLogRepositoryProtocol(Protocol):
    """Append and aggregate access to the usage ledger."""

    async def create(
        self, db: AsyncSession, *, values: dict[str, Any], uow: Optional[UnitOfWork] = None
    ) -> UsageLog:
        """Insert a ledger entry."""
        ...

    async def sum_hours(
        self, db: AsyncSession, *, client_id: UUID, start: datetime, end: datetime
    ) -> float:
        """Total hours with ``start <= logged_at < end``."""
        ...

    async def totals_since(
        self, db: AsyncSession, *, since: datetime
    ) -> List[tuple[UUID, float, int]]:
        """Per-client ``(client_id, hours, distinct_tasks)`` since *since*."""
        ...


class UsageLogRepository(UsageLogRepositoryProtocol):
    """Delegates to the crud.usage_log singleton."""

    async def create(
        self, db: AsyncSession, *, values: dict[str, Any], uow: Optional[UnitOfWork] = None
    ) -> UsageLog:
        """Insert a ledger entry."""
        return await crud.usage_log.create(db, obj_in=values, uow=uow)

    async def sum_hours(
        self, db: AsyncSession, *, client_id: UUID, start: datetime, end: datetime
    ) -> float:
        """Total hours with ``start <= logged_at < end``."""
        return await crud.usage_log.sum_hours(db, client_id=client_id, start=start, end=end)

    async def totals_since(
        self, db: AsyncSession, *, since: datetime
    ) -> List[tuple[UUID, float, int]]:
        """Per-client ``(client_id, hours, distinct_tasks)`` since *since*."""
        return await crud.usage_log.totals_since(db, since=since)

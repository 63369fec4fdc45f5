"""CRUD operations for UsageLog model."""

from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from workledger.crud._base import CRUDBase
from workledger.models.usage_log import UsageLog
from workledger.schemas.usage import UsageLogCreate


class CRUDUsageLog(CRUDBase[UsageLog, UsageLogCreate, UsageLogCreate]):
    """Append and aggregate operations on the usage ledger.

    Ledger entries are never updated or deleted.
    """

    async def sum_hours(
        self, db: AsyncSession, *, client_id: UUID, start: datetime, end: datetime
    ) -> float:
        """Total hours logged for a client with ``start <= logged_at < end``."""
        result = await db.execute(
            select(func.coalesce(func.sum(UsageLog.hours), 0)).where(
                UsageLog.client_id == client_id,
                UsageLog.logged_at >= start,
                UsageLog.logged_at < end,
            )
        )
        return float(result.scalar_one())

    async def totals_since(
        self, db: AsyncSession, *, since: datetime
    ) -> List[tuple[UUID, float, int]]:
        """Per-client ``(client_id, total_hours, distinct_task_count)`` since *since*."""
        result = await db.execute(
            select(
                UsageLog.client_id,
                func.coalesce(func.sum(UsageLog.hours), 0),
                func.count(func.distinct(UsageLog.task_id)),
            )
            .where(UsageLog.logged_at >= since)
            .group_by(UsageLog.client_id)
        )
        return [(row[0], float(row[1]), int(row[2])) for row in result.all()]


usage_log = CRUDUsageLog(UsageLog)

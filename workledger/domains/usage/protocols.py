"""Usage domain protocols."""

from datetime import datetime
from typing import List, Optional, Protocol, Sequence, runtime_checkable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.core.context import BaseContext
from workledger.models import Client, UsageLog


@runtime_checkable
class UsageLedgerProtocol(Protocol):
    """Append-only writer of consumed hours."""

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
        """Insert a ledger entry and refresh the client's cached consumption."""
        ...


@runtime_checkable
class UsageAggregatorProtocol(Protocol):
    """Read side of the ledger: cycle aggregates, risk and recaps."""

    async def aggregate(self, db: AsyncSession, client: Client) -> schemas.ClientUsage:
        """Consumption of *client* in its current cycle."""
        ...

    async def usage_overview(
        self, db: AsyncSession, client_ids: Optional[Sequence[UUID]] = None
    ) -> List[schemas.ClientUsage]:
        """Aggregates for the given clients, or all clients."""
        ...

    async def weekly_summary(
        self, db: AsyncSession, since: Optional[datetime] = None
    ) -> List[schemas.WeeklyUsageSummary]:
        """Hours and distinct tasks per client since *since*."""
        ...


@runtime_checkable
class UsageServiceProtocol(Protocol):
    """Principal-scoped usage operations exposed over HTTP."""

    async def log_hours(
        self, db: AsyncSession, obj_in: schemas.UsageLogCreate, ctx: BaseContext
    ) -> UsageLog:
        """Append hours logged by the acting principal."""
        ...

    async def get_client_usage(
        self, db: AsyncSession, client_id: UUID, ctx: BaseContext
    ) -> schemas.ClientUsage:
        """Aggregate and risk for one client."""
        ...

    async def get_overview(self, db: AsyncSession, ctx: BaseContext) -> List[schemas.ClientUsage]:
        """Aggregate and risk for every client the principal can see."""
        ...

"""Usage service: principal-scoped facade over the ledger and aggregator."""

from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.core.context import BaseContext
from workledger.domains.access.protocols import AccessPolicyProtocol
from workledger.domains.access.types import AccessAction
from workledger.domains.clients.exceptions import ClientNotFoundError
from workledger.domains.clients.repository import ClientRepositoryProtocol
from workledger.domains.usage.protocols import (
    UsageAggregatorProtocol,
    UsageLedgerProtocol,
    UsageServiceProtocol,
)
from workledger.models import UsageLog


class UsageService(UsageServiceProtocol):
    """Checks access, then delegates to the ledger or the aggregator."""

    def __init__(
        self,
        ledger: UsageLedgerProtocol,
        aggregator: UsageAggregatorProtocol,
        client_repo: ClientRepositoryProtocol,
        access: AccessPolicyProtocol,
    ) -> None:
        """Initialize with collaborators."""
        self._ledger = ledger
        self._aggregator = aggregator
        self._client_repo = client_repo
        self._access = access

    async def log_hours(
        self, db: AsyncSession, obj_in: schemas.UsageLogCreate, ctx: BaseContext
    ) -> UsageLog:
        """Append hours logged by the acting principal."""
        self._access.authorize(ctx.principal, AccessAction.USAGE_LOG, obj_in.client_id)
        entry = await self._ledger.append(
            db,
            client_id=obj_in.client_id,
            hours=obj_in.hours,
            task_id=obj_in.task_id,
            logged_by=ctx.actor_id,
        )
        ctx.logger.with_context(client_id=str(obj_in.client_id)).info(
            f"Logged {obj_in.hours}h of usage"
        )
        return entry

    async def get_client_usage(
        self, db: AsyncSession, client_id: UUID, ctx: BaseContext
    ) -> schemas.ClientUsage:
        """Aggregate and risk for one client."""
        self._access.authorize(ctx.principal, AccessAction.USAGE_READ, client_id)
        client = await self._client_repo.get(db, client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        return await self._aggregator.aggregate(db, client)

    async def get_overview(self, db: AsyncSession, ctx: BaseContext) -> List[schemas.ClientUsage]:
        """Aggregate and risk for every client the principal can see."""
        if ctx.principal.is_staff:
            return await self._aggregator.usage_overview(db)
        visible = [
            client_id
            for client_id in ctx.principal.client_ids
            if self._access.can(ctx.principal, AccessAction.USAGE_READ, client_id)
        ]
        if not visible:
            return []
        return await self._aggregator.usage_overview(db, visible)

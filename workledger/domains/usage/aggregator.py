"""Usage aggregator: cycle totals, percent used and risk per client."""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.domains.billing.repository import PlanRepositoryProtocol
from workledger.domains.clients.repository import ClientRepositoryProtocol
from workledger.domains.usage.protocols import UsageAggregatorProtocol
from workledger.domains.usage.repository import UsageLogRepositoryProtocol
from workledger.domains.usage.types import classify_risk, cycle_window, percent_used
from workledger.models import Client

logger = logging.getLogger(__name__)

NO_PLAN_NAME = "No plan"


class UsageAggregator(UsageAggregatorProtocol):
    """Reads the ledger; never writes."""

    def __init__(
        self,
        usage_repo: UsageLogRepositoryProtocol,
        client_repo: ClientRepositoryProtocol,
        plan_repo: PlanRepositoryProtocol,
        recap_days: int = 7,
    ) -> None:
        """Initialize with repository dependencies and the recap window."""
        self._usage_repo = usage_repo
        self._client_repo = client_repo
        self._plan_repo = plan_repo
        self._recap_days = recap_days

    async def aggregate(self, db: AsyncSession, client: Client) -> schemas.ClientUsage:
        """Sum the ledger over the client's current cycle and classify the risk."""
        start, end = cycle_window(client.cycle_start)
        hours_used = await self._usage_repo.sum_hours(
            db, client_id=client.id, start=start, end=end
        )
        pct_used, capacity_disabled = percent_used(hours_used, client.hours_monthly)
        return schemas.ClientUsage(
            client_id=client.id,
            cycle_start=client.cycle_start,
            cycle_end=end.date(),
            hours_monthly=client.hours_monthly,
            hours_used=hours_used,
            pct_used=pct_used,
            capacity_disabled=capacity_disabled,
            risk_flag=classify_risk(pct_used),
        )

    async def usage_overview(
        self, db: AsyncSession, client_ids: Optional[Sequence[UUID]] = None
    ) -> List[schemas.ClientUsage]:
        """Aggregates for the given clients (or all), highest consumption first."""
        clients = await self._client_repo.get_many(db, client_ids)
        overview = [await self.aggregate(db, client) for client in clients]
        return sorted(overview, key=lambda usage: (-usage.pct_used, str(usage.client_id)))

    async def weekly_summary(
        self, db: AsyncSession, since: Optional[datetime] = None
    ) -> List[schemas.WeeklyUsageSummary]:
        """Hours and distinct tasks per client since *since*.

        Defaults to the configured recap window ending now. Clients without
        entries in the window are reported with zero hours.
        """
        if since is None:
            since = datetime.now(timezone.utc) - timedelta(days=self._recap_days)

        totals = {
            client_id: (hours, task_count)
            for client_id, hours, task_count in await self._usage_repo.totals_since(
                db, since=since
            )
        }
        clients = await self._client_repo.get_many(db)
        plan_codes = {c.plan_code for c in clients if c.plan_code}
        plans = {p.code: p for p in await self._plan_repo.get_by_codes(db, codes=plan_codes)}

        summaries = []
        for client in clients:
            hours, task_count = totals.get(client.id, (0.0, 0))
            plan = plans.get(client.plan_code) if client.plan_code else None
            summaries.append(
                schemas.WeeklyUsageSummary(
                    client_id=client.id,
                    client_name=client.name,
                    plan_name=plan.name if plan else NO_PLAN_NAME,
                    total_hours=hours,
                    task_count=task_count,
                )
            )
        logger.info("Weekly summary built for %d clients since %s", len(summaries), since)
        return summaries

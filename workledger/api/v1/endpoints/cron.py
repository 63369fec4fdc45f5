"""API endpoints triggered by the scheduler.

Both routes require ``Authorization: Bearer <CRON_SECRET>`` when a secret is
configured.
"""

from datetime import datetime, timedelta, timezone

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.api import deps
from workledger.api.deps import Inject
from workledger.api.router import TrailingSlashRouter
from workledger.core.config import settings
from workledger.core.context import SystemContext
from workledger.domains.billing.protocols import CycleResetterProtocol
from workledger.domains.usage.protocols import UsageAggregatorProtocol

router = TrailingSlashRouter(dependencies=[Depends(deps.verify_cron_secret)])


@router.post("/cycle-reset", response_model=schemas.CycleResetResult)
async def cycle_reset(
    *,
    db: AsyncSession = Depends(deps.get_db),
    ctx: SystemContext = deps.get_system_context("cycle_reset"),
    resetter: CycleResetterProtocol = Inject(CycleResetterProtocol),
) -> schemas.CycleResetResult:
    """Zero consumption and start a new cycle for every due client."""
    return await resetter.reset(db, ctx)


@router.post("/weekly-recap", response_model=schemas.WeeklyRecap)
async def weekly_recap(
    *,
    db: AsyncSession = Depends(deps.get_db),
    ctx: SystemContext = deps.get_system_context("weekly_recap"),
    aggregator: UsageAggregatorProtocol = Inject(UsageAggregatorProtocol),
) -> schemas.WeeklyRecap:
    """Hours and distinct tasks per client over the recap window."""
    since = datetime.now(timezone.utc) - timedelta(days=settings.WEEKLY_RECAP_DAYS)
    summaries = await aggregator.weekly_summary(db, since=since)
    ctx.logger.info(f"Weekly recap built for {len(summaries)} clients")
    return schemas.WeeklyRecap(ok=True, since=since, summaries=summaries)

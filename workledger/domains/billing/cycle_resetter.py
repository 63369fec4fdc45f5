"""Billing cycle resetter: the scheduled job that starts new cycles."""

from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.core.config.enums import CycleResetMode
from workledger.core.context import BaseContext
from workledger.db.unit_of_work import UnitOfWork
from workledger.domains.billing.protocols import CycleResetterProtocol
from workledger.domains.billing.types import select_for_reset
from workledger.domains.clients.repository import ClientRepositoryProtocol
from workledger.domains.usage.types import utc_today


class CycleResetter(CycleResetterProtocol):
    """Zeroes ``hours_used_month`` and moves ``cycle_start`` to today.

    Running it twice on the same day leaves the same end state.
    """

    def __init__(
        self,
        client_repo: ClientRepositoryProtocol,
        mode: CycleResetMode = CycleResetMode.ON_OR_BEFORE,
    ) -> None:
        """Initialize with the client repository and the selection mode."""
        self._client_repo = client_repo
        self._mode = mode

    async def reset(
        self, db: AsyncSession, ctx: BaseContext, today: Optional[date] = None
    ) -> schemas.CycleResetResult:
        """Reset every client whose cycle is due on *today* (default: current UTC date)."""
        today = today or utc_today()
        candidates = await self._client_repo.get_with_cycle_start_on_or_before(db, today)
        due = select_for_reset(candidates, today, self._mode)
        client_ids = [client.id for client in due]

        async with UnitOfWork(db) as uow:
            await self._client_repo.reset_cycle(
                db, client_ids=client_ids, cycle_start=today, uow=uow
            )
            await uow.commit()

        ctx.logger.with_context(mode=self._mode.value).info(
            f"Billing cycle reset for {len(client_ids)} clients on {today.isoformat()}"
        )
        return schemas.CycleResetResult(
            reset_count=len(client_ids), affected_client_ids=client_ids, reset_date=today
        )

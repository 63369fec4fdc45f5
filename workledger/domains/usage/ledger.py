"""Usage ledger: the append-only source of truth for consumed hours.

Every append is an independent insert. The client's ``hours_used_month`` is a
cache that is recomputed from the ledger after each append, never incremented.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workledger.db.unit_of_work import UnitOfWork
from workledger.domains.clients.exceptions import ClientNotFoundError
from workledger.domains.clients.repository import ClientRepositoryProtocol
from workledger.domains.tasks.exceptions import TaskNotFoundError
from workledger.domains.tasks.repository import TaskRepositoryProtocol
from workledger.domains.usage.exceptions import InvalidHoursError, TaskClientMismatchError
from workledger.domains.usage.protocols import UsageLedgerProtocol
from workledger.domains.usage.repository import UsageLogRepositoryProtocol
from workledger.domains.usage.types import cycle_window
from workledger.models import Client, UsageLog

logger = logging.getLogger(__name__)


class UsageLedger(UsageLedgerProtocol):
    """Appends ledger entries and keeps the per-client cache in step."""

    def __init__(
        self,
        usage_repo: UsageLogRepositoryProtocol,
        client_repo: ClientRepositoryProtocol,
        task_repo: TaskRepositoryProtocol,
    ) -> None:
        """Initialize the ledger with repository dependencies."""
        self._usage_repo = usage_repo
        self._client_repo = client_repo
        self._task_repo = task_repo

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
        """Insert a ledger entry.

        When *task_id* is given and *increment_task* is set, the task's cached
        ``hours_spent`` grows by *hours* in the same transaction. Completion
        entries pass ``increment_task=False`` because their hours were read
        from the task in the first place.
        """
        if hours is None or hours <= 0:
            raise InvalidHoursError(hours)

        client = await self._client_repo.get(db, client_id)
        if client is None:
            raise ClientNotFoundError(client_id)

        if task_id is not None:
            task = await self._task_repo.get(db, task_id)
            if task is None:
                raise TaskNotFoundError(task_id)
            if task.client_id != client_id:
                raise TaskClientMismatchError(task_id, client_id)

        async with UnitOfWork(db) as uow:
            entry = await self._usage_repo.create(
                db,
                values={
                    "client_id": client_id,
                    "task_id": task_id,
                    "hours": hours,
                    "logged_by": logged_by,
                    "logged_at": datetime.now(timezone.utc),
                },
                uow=uow,
            )
            if task_id is not None and increment_task:
                await self._task_repo.add_hours_spent(db, task_id=task_id, hours=hours, uow=uow)
            await uow.commit()

        logger.info("Logged %.2fh for client %s (task=%s)", hours, client_id, task_id)
        await self._refresh_cached_usage(db, client)
        return entry

    async def _refresh_cached_usage(self, db: AsyncSession, client: Client) -> None:
        """Recompute ``hours_used_month`` from the ledger.

        The entry is already committed, so a failure here only leaves the cache
        stale until the next append.
        """
        start, end = cycle_window(client.cycle_start)
        try:
            hours_used = await self._usage_repo.sum_hours(
                db, client_id=client.id, start=start, end=end
            )
            await self._client_repo.set_hours_used(db, client_id=client.id, hours_used=hours_used)
        except Exception:
            logger.warning(
                "Failed to refresh cached usage for client %s", client.id, exc_info=True
            )

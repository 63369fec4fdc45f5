"""Position sequencer: end-of-partition placement and batch reorder."""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.core.shared_models import TaskStatus
from workledger.db.unit_of_work import UnitOfWork
from workledger.domains.clients.repository import ClientRepositoryProtocol
from workledger.domains.tasks.locks import ClientLockRegistry
from workledger.domains.tasks.protocols import TaskSequencerProtocol
from workledger.domains.tasks.repository import TaskRepositoryProtocol
from workledger.domains.tasks.types import next_position_after, validate_reorder_batch

logger = logging.getLogger(__name__)


class TaskSequencer(TaskSequencerProtocol):
    """Keeps positions unique within each ``(client, status)`` partition."""

    def __init__(
        self,
        task_repo: TaskRepositoryProtocol,
        client_repo: ClientRepositoryProtocol,
        locks: ClientLockRegistry,
    ) -> None:
        """Initialize with repositories and the shared client lock registry."""
        self._task_repo = task_repo
        self._client_repo = client_repo
        self._locks = locks

    async def next_position(self, db: AsyncSession, client_id: UUID, status: TaskStatus) -> int:
        """Position at the end of a partition: ``max + 1``, or 0 when empty.

        Callers that write the result must hold the client lock.
        """
        max_position = await self._task_repo.get_max_position(
            db, client_id=client_id, status=TaskStatus(status).value
        )
        return next_position_after(max_position)

    async def reorder(
        self,
        db: AsyncSession,
        client_id: UUID,
        status: TaskStatus,
        order: Sequence[schemas.TaskReorderItem],
    ) -> int:
        """Validate the whole batch, then write every position in one transaction.

        Raises ReorderIntegrityError before any write if a member fails.
        """
        if not order:
            return 0

        async with self._locks.get(client_id):
            async with UnitOfWork(db) as uow:
                await self._client_repo.get_for_update(db, client_id)
                partition = await self._task_repo.get_by_client(
                    db, client_id=client_id, status=TaskStatus(status).value
                )
                validate_reorder_batch(partition, order)
                moved = await self._task_repo.set_positions(
                    db,
                    positions=[(entry.id, entry.position) for entry in order],
                    uow=uow,
                )
                await uow.commit()

        logger.info(
            "Reordered %d %s tasks for client %s", moved, TaskStatus(status).value, client_id
        )
        return moved

"""Task state machine.

Three states, all six transitions allowed, guarded by one rule: a client has
at most one task in progress. The check-then-set runs under three locks:

1. a per-client ``asyncio.Lock`` for writers in this process,
2. ``SELECT ... FOR UPDATE`` on the client row for writers in other processes,
3. the partial unique index on ``task(client_id) WHERE status = 'in_progress'``
   as the last line, whose violation is reported as the same conflict.

Completing a task appends its hours to the usage ledger after the transition
commits, in a separate session. That append may fail without undoing the
transition.
"""

from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.core.context import BaseContext
from workledger.core.shared_models import TaskStatus
from workledger.db.unit_of_work import UnitOfWork
from workledger.domains.clients.exceptions import ClientNotFoundError
from workledger.domains.clients.repository import ClientRepositoryProtocol
from workledger.domains.tasks.exceptions import (
    ActiveTaskConflictError,
    EmptyTaskUpdateError,
    TaskNotFoundError,
)
from workledger.domains.tasks.locks import ClientLockRegistry
from workledger.domains.tasks.protocols import TaskSequencerProtocol, TaskStateMachineProtocol
from workledger.domains.tasks.repository import TaskRepositoryProtocol, is_single_active_violation
from workledger.domains.tasks.types import completion_hours
from workledger.domains.usage.protocols import UsageLedgerProtocol
from workledger.models import Task

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class TaskStateMachine(TaskStateMachineProtocol):
    """Applies task updates and status transitions."""

    def __init__(
        self,
        task_repo: TaskRepositoryProtocol,
        client_repo: ClientRepositoryProtocol,
        sequencer: TaskSequencerProtocol,
        ledger: UsageLedgerProtocol,
        locks: ClientLockRegistry,
        default_task_hours: float = 1.0,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        """Initialize with collaborators.

        ``session_factory`` opens the session used for the completion append;
        it defaults to ``get_db_context``.
        """
        self._task_repo = task_repo
        self._client_repo = client_repo
        self._sequencer = sequencer
        self._ledger = ledger
        self._locks = locks
        self._default_task_hours = default_task_hours
        self._session_factory = session_factory

    async def transition(
        self, db: AsyncSession, task_id: UUID, update: schemas.TaskUpdate, ctx: BaseContext
    ) -> Task:
        """Apply a partial update, including an optional status change.

        Raises:
            EmptyTaskUpdateError: no field was provided.
            TaskNotFoundError: the task does not exist.
            ActiveTaskConflictError: another task of the client is in progress.
        """
        changes = update.changes()
        if not changes:
            raise EmptyTaskUpdateError()

        existing = await self._task_repo.get(db, task_id)
        if existing is None:
            raise TaskNotFoundError(task_id)
        client_id = existing.client_id
        log = ctx.logger.with_context(task_id=str(task_id), client_id=str(client_id))

        completed = False
        async with self._locks.get(client_id):
            try:
                async with UnitOfWork(db) as uow:
                    await self._client_repo.get_for_update(db, client_id)
                    task = await self._task_repo.get_for_update(db, task_id)
                    if task is None:
                        raise TaskNotFoundError(task_id)

                    current = TaskStatus(task.status)
                    desired = TaskStatus(changes["status"]) if "status" in changes else current
                    if desired != current:
                        changes.update(await self._status_change(db, task, current, desired))
                        completed = desired == TaskStatus.DONE

                    task = await self._task_repo.update(db, db_obj=task, values=changes, uow=uow)
                    await uow.commit()
            except IntegrityError as exc:
                if not is_single_active_violation(exc):
                    raise
                raise await self._conflict_from_index(db, client_id, task_id) from exc

        if desired != current:
            log.info(f"Task moved {current.value} -> {desired.value}")
        if completed:
            await self._record_completion(task, ctx)
        return task

    async def create(self, db: AsyncSession, obj_in: schemas.TaskCreate, ctx: BaseContext) -> Task:
        """Insert a task in any status at the end of its partition.

        Starting ``in_progress`` is subject to the single-active rule; starting
        ``done`` stamps ``completed_at``.
        """
        client_id = obj_in.client_id
        status = TaskStatus(obj_in.status)

        async with self._locks.get(client_id):
            try:
                async with UnitOfWork(db) as uow:
                    client = await self._client_repo.get_for_update(db, client_id)
                    if client is None:
                        raise ClientNotFoundError(client_id)
                    if status == TaskStatus.IN_PROGRESS:
                        await self._ensure_no_active_task(db, client_id)

                    values: dict[str, Any] = {
                        "client_id": client_id,
                        "title": obj_in.title,
                        "description": obj_in.description,
                        "priority": obj_in.priority.value,
                        "status": status.value,
                        "est_hours": obj_in.est_hours,
                        "assigned_dev_id": obj_in.assigned_dev_id,
                        "position": await self._sequencer.next_position(db, client_id, status),
                        "completed_at": (
                            datetime.now(timezone.utc) if status == TaskStatus.DONE else None
                        ),
                    }
                    task = await self._task_repo.create(db, values=values, uow=uow)
                    await uow.commit()
            except IntegrityError as exc:
                if not is_single_active_violation(exc):
                    raise
                raise await self._conflict_from_index(db, client_id, None) from exc

        ctx.logger.with_context(task_id=str(task.id), client_id=str(client_id)).info(
            f"Task created in {status.value}"
        )
        return task

    async def _status_change(
        self, db: AsyncSession, task: Task, current: TaskStatus, desired: TaskStatus
    ) -> dict[str, Any]:
        """Extra field values implied by moving *task* from *current* to *desired*."""
        if desired == TaskStatus.IN_PROGRESS:
            await self._ensure_no_active_task(db, task.client_id, exclude_id=task.id)

        values: dict[str, Any] = {
            "position": await self._sequencer.next_position(db, task.client_id, desired),
        }
        if desired == TaskStatus.DONE:
            if task.completed_at is None:
                values["completed_at"] = datetime.now(timezone.utc)
        elif current == TaskStatus.DONE:
            values["completed_at"] = None
        return values

    async def _ensure_no_active_task(
        self, db: AsyncSession, client_id: UUID, exclude_id: Optional[UUID] = None
    ) -> None:
        blocker = await self._task_repo.get_in_progress(
            db, client_id=client_id, exclude_id=exclude_id
        )
        if blocker is not None:
            raise ActiveTaskConflictError(blocker.id, blocker.title)

    async def _conflict_from_index(
        self, db: AsyncSession, client_id: UUID, exclude_id: Optional[UUID]
    ) -> ActiveTaskConflictError:
        """Build the conflict for a lost race that only the unique index caught."""
        blocker = await self._task_repo.get_in_progress(
            db, client_id=client_id, exclude_id=exclude_id
        )
        if blocker is None:
            return ActiveTaskConflictError()
        return ActiveTaskConflictError(blocker.id, blocker.title)

    async def _record_completion(self, task: Task, ctx: BaseContext) -> None:
        """Append the completed task's hours to the ledger. Never raises."""
        hours = completion_hours(task, self._default_task_hours)
        log = ctx.logger.with_context(task_id=str(task.id), client_id=str(task.client_id))
        if hours <= 0:
            log.info("Completed task has no hours to log")
            return

        session_factory = self._session_factory
        if session_factory is None:
            from workledger.db.session import get_db_context

            session_factory = get_db_context

        try:
            async with session_factory() as aux_db:
                await self._ledger.append(
                    aux_db,
                    client_id=task.client_id,
                    task_id=task.id,
                    hours=hours,
                    logged_by=ctx.actor_id,
                    increment_task=False,
                )
        except Exception as exc:
            log.warning(f"Failed to log {hours}h for completed task: {exc}", exc_info=True)

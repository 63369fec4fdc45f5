"""Task writes against Postgres: the single-active index, reorder and completion."""

import asyncio
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from workledger import crud
from workledger.core.context import BaseContext
from workledger.core.shared_models import PrincipalRole, TaskStatus
from workledger.domains.clients.repository import ClientRepository
from workledger.domains.tasks.exceptions import ActiveTaskConflictError, ReorderIntegrityError
from workledger.domains.tasks.locks import ClientLockRegistry
from workledger.domains.tasks.repository import TaskRepository, is_single_active_violation
from workledger.domains.tasks.sequencer import TaskSequencer
from workledger.domains.tasks.state_machine import TaskStateMachine
from workledger.domains.usage.ledger import UsageLedger
from workledger.domains.usage.repository import UsageLogRepository
from workledger.models import Task, UsageLog
from workledger.schemas.principal import Principal
from workledger.schemas.task import TaskReorderItem, TaskUpdate

from .conftest import requires_postgres

pytestmark = [pytest.mark.integration, requires_postgres]

ACTOR_ID = UUID("00000000-0000-0000-0000-0000000000aa")


def _ctx() -> BaseContext:
    return BaseContext(principal=Principal(id=ACTOR_ID, role=PrincipalRole.ADMIN))


class _StaleCheckTaskRepository(TaskRepository):
    """Misses the active task once, like a writer that checked before the winner committed."""

    def __init__(self) -> None:
        self._stale = True

    async def get_in_progress(
        self, db, *, client_id: UUID, exclude_id: Optional[UUID] = None
    ) -> Optional[Task]:
        if self._stale:
            self._stale = False
            return None
        return await super().get_in_progress(db, client_id=client_id, exclude_id=exclude_id)


def _state_machine(session_factory, task_repo: Optional[TaskRepository] = None):
    """A state machine over the real repositories with its own process-local locks."""
    tasks = task_repo or TaskRepository()
    clients = ClientRepository()
    locks = ClientLockRegistry()
    return TaskStateMachine(
        task_repo=tasks,
        client_repo=clients,
        sequencer=TaskSequencer(tasks, clients, locks),
        ledger=UsageLedger(UsageLogRepository(), clients, tasks),
        locks=locks,
        session_factory=session_factory,
    )


async def _reload(session_factory, task_id: UUID) -> Task:
    async with session_factory() as db:
        return await crud.task.get(db, task_id)


# ===========================================================================
# Single active task per client
# ===========================================================================


@pytest.mark.asyncio
async def test_partial_index_rejects_second_in_progress_task(session_factory, seed):
    client = await seed.client()
    first = await seed.task(client.id, "Fix login")
    second = await seed.task(client.id, "Write docs", position=1)

    async with session_factory() as db:
        task = await crud.task.get(db, first.id)
        await crud.task.update(db, db_obj=task, obj_in={"status": "in_progress"})

    async with session_factory() as db:
        task = await crud.task.get(db, second.id)
        with pytest.raises(IntegrityError) as exc_info:
            await crud.task.update(db, db_obj=task, obj_in={"status": "in_progress"})
        await db.rollback()

    assert is_single_active_violation(exc_info.value)


@pytest.mark.asyncio
async def test_index_violation_is_reported_as_conflict_naming_winner(session_factory, seed):
    client = await seed.client()
    winner = await seed.task(client.id, "Fix login", status=TaskStatus.IN_PROGRESS)
    loser = await seed.task(client.id, "Write docs")
    machine = _state_machine(session_factory, _StaleCheckTaskRepository())

    async with session_factory() as db:
        with pytest.raises(ActiveTaskConflictError) as exc_info:
            await machine.transition(
                db, loser.id, TaskUpdate(status=TaskStatus.IN_PROGRESS), _ctx()
            )

    assert exc_info.value.blocking_task_id == winner.id
    assert exc_info.value.blocking_task_title == "Fix login"
    assert (await _reload(session_factory, loser.id)).status == TaskStatus.QUEUED.value


@pytest.mark.asyncio
async def test_concurrent_starts_from_separate_processes_admit_one(session_factory, seed):
    client = await seed.client()
    first = await seed.task(client.id, "Fix login")
    second = await seed.task(client.id, "Write docs", position=1)

    async def _start(task_id: UUID):
        # Separate lock registries: only the database serializes these writers
        async with session_factory() as db:
            return await _state_machine(session_factory).transition(
                db, task_id, TaskUpdate(status=TaskStatus.IN_PROGRESS), _ctx()
            )

    results = await asyncio.gather(_start(first.id), _start(second.id), return_exceptions=True)

    started = [r for r in results if isinstance(r, Task)]
    conflicts = [r for r in results if isinstance(r, ActiveTaskConflictError)]
    assert len(started) == 1 and len(conflicts) == 1
    assert conflicts[0].blocking_task_id == started[0].id

    async with session_factory() as db:
        active = (
            await db.execute(
                select(Task).where(Task.client_id == client.id, Task.status == "in_progress")
            )
        ).scalars().all()
    assert [t.id for t in active] == [started[0].id]


# ===========================================================================
# Positions
# ===========================================================================


@pytest.mark.asyncio
async def test_max_position_of_partition(db, seed):
    client = await seed.client()

    assert await crud.task.get_max_position(db, client_id=client.id, status="queued") is None

    for position in (0, 1, 5):
        await seed.task(client.id, f"Task {position}", position=position)
    await seed.task(client.id, "Shipped", status=TaskStatus.DONE, position=9)

    assert await crud.task.get_max_position(db, client_id=client.id, status="queued") == 5


@pytest.mark.asyncio
async def test_reorder_swap_commits_under_deferred_constraint(session_factory, seed):
    client = await seed.client()
    a = await seed.task(client.id, "Task A", position=0)
    b = await seed.task(client.id, "Task B", position=1)
    tasks, clients = TaskRepository(), ClientRepository()
    sequencer = TaskSequencer(tasks, clients, ClientLockRegistry())

    async with session_factory() as db:
        moved = await sequencer.reorder(
            db,
            client.id,
            TaskStatus.QUEUED,
            [TaskReorderItem(id=a.id, position=1), TaskReorderItem(id=b.id, position=0)],
        )

    assert moved == 2
    assert (await _reload(session_factory, a.id)).position == 1
    assert (await _reload(session_factory, b.id)).position == 0


@pytest.mark.asyncio
async def test_rejected_reorder_writes_nothing(session_factory, seed):
    client = await seed.client()
    other = await seed.client("Globex")
    mine = await seed.task(client.id, "Mine", position=0)
    theirs = await seed.task(other.id, "Theirs", position=0)
    tasks, clients = TaskRepository(), ClientRepository()
    sequencer = TaskSequencer(tasks, clients, ClientLockRegistry())

    async with session_factory() as db:
        with pytest.raises(ReorderIntegrityError):
            await sequencer.reorder(
                db,
                client.id,
                TaskStatus.QUEUED,
                [
                    TaskReorderItem(id=mine.id, position=3),
                    TaskReorderItem(id=theirs.id, position=4),
                ],
            )

    assert (await _reload(session_factory, mine.id)).position == 0
    assert (await _reload(session_factory, theirs.id)).position == 0


# ===========================================================================
# Completion
# ===========================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,completed",
    [("done", False), ("queued", True), ("in_progress", True)],
)
async def test_completed_at_must_match_done_status(db, seed, status, completed):
    client = await seed.client()

    with pytest.raises(IntegrityError):
        await crud.task.create(
            db,
            obj_in={
                "client_id": client.id,
                "title": "Inconsistent",
                "status": status,
                "completed_at": datetime.now(timezone.utc) if completed else None,
            },
        )


@pytest.mark.asyncio
async def test_done_and_back_keeps_completion_consistent(session_factory, seed):
    client = await seed.client()
    task = await seed.task(client.id, "Fix login", status=TaskStatus.IN_PROGRESS, est_hours=3)
    machine = _state_machine(session_factory)

    async with session_factory() as db:
        done = await machine.transition(db, task.id, TaskUpdate(status=TaskStatus.DONE), _ctx())
    async with session_factory() as db:
        reopened = await machine.transition(
            db, task.id, TaskUpdate(status=TaskStatus.QUEUED), _ctx()
        )

    assert done.completed_at is not None
    assert reopened.completed_at is None

    async with session_factory() as db:
        entries = (
            await db.execute(select(UsageLog).where(UsageLog.client_id == client.id))
        ).scalars().all()
    assert [(e.hours, e.task_id) for e in entries] == [(3.0, task.id)]

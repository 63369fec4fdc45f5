"""Tasks domain test fixtures and helpers."""

from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Optional
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from workledger.core.context import BaseContext
from workledger.core.shared_models import PrincipalRole, TaskPriority, TaskStatus
from workledger.domains.access.fakes.policy import FakeAccessPolicy
from workledger.domains.clients.fakes.repository import FakeClientRepository
from workledger.domains.tasks.fakes.repository import FakeTaskRepository
from workledger.domains.tasks.locks import ClientLockRegistry
from workledger.domains.tasks.sequencer import TaskSequencer
from workledger.domains.tasks.service import TaskService
from workledger.domains.tasks.state_machine import TaskStateMachine
from workledger.domains.usage.fakes.ledger import FakeUsageLedger
from workledger.models import Client, Task
from workledger.schemas.principal import Principal

DEFAULT_CLIENT_ID = UUID("00000000-0000-0000-0000-000000000001")
OTHER_CLIENT_ID = UUID("00000000-0000-0000-0000-000000000002")
ACTOR_ID = UUID("00000000-0000-0000-0000-0000000000aa")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_ctx(role: PrincipalRole = PrincipalRole.ADMIN) -> BaseContext:
    """Build a context for a principal that belongs to the default client."""
    return BaseContext(
        principal=Principal(id=ACTOR_ID, role=role, client_ids=[DEFAULT_CLIENT_ID])
    )


def _make_client(client_id: UUID = DEFAULT_CLIENT_ID, hours_monthly: int = 40) -> Client:
    return Client(
        id=client_id,
        name="Acme",
        plan_code="starter",
        hours_monthly=hours_monthly,
        hours_used_month=0.0,
        cycle_start=date(2024, 3, 1),
    )


def _make_task(
    title: str = "Fix login",
    *,
    client_id: UUID = DEFAULT_CLIENT_ID,
    status: TaskStatus = TaskStatus.QUEUED,
    priority: TaskPriority = TaskPriority.MEDIUM,
    position: int = 0,
    est_hours: Optional[int] = None,
    hours_spent: Optional[float] = None,
    completed_at: Optional[datetime] = None,
    task_id: Optional[UUID] = None,
) -> Task:
    now = datetime.now(timezone.utc)
    return Task(
        id=task_id or uuid4(),
        client_id=client_id,
        title=title,
        description=None,
        priority=priority.value,
        status=status.value,
        est_hours=est_hours,
        hours_spent=hours_spent,
        assigned_dev_id=None,
        position=position,
        completed_at=completed_at,
        created_at=now,
        modified_at=now,
    )


@asynccontextmanager
async def _fake_session_factory():
    yield AsyncMock()


class TaskHarness:
    """Real state machine, sequencer and service wired to in-memory fakes."""

    def __init__(self, default_task_hours: float = 1.0) -> None:
        self.db = AsyncMock()
        self.tasks = FakeTaskRepository()
        self.clients = FakeClientRepository()
        self.ledger = FakeUsageLedger()
        self.access = FakeAccessPolicy()
        self.locks = ClientLockRegistry()
        self.sequencer = TaskSequencer(self.tasks, self.clients, self.locks)
        self.state_machine = TaskStateMachine(
            task_repo=self.tasks,
            client_repo=self.clients,
            sequencer=self.sequencer,
            ledger=self.ledger,
            locks=self.locks,
            default_task_hours=default_task_hours,
            session_factory=_fake_session_factory,
        )
        self.service = TaskService(
            task_repo=self.tasks,
            client_repo=self.clients,
            state_machine=self.state_machine,
            sequencer=self.sequencer,
            access=self.access,
        )
        self.clients.seed(_make_client())


@pytest.fixture
def harness() -> TaskHarness:
    return TaskHarness()

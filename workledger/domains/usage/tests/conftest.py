"""Usage domain test fixtures and helpers."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from workledger.core.context import BaseContext
from workledger.core.shared_models import PrincipalRole
from workledger.domains.access.fakes.policy import FakeAccessPolicy
from workledger.domains.billing.fakes.repository import FakePlanRepository
from workledger.domains.clients.fakes.repository import FakeClientRepository
from workledger.domains.tasks.fakes.repository import FakeTaskRepository
from workledger.domains.usage.aggregator import UsageAggregator
from workledger.domains.usage.fakes.repository import FakeUsageLogRepository
from workledger.domains.usage.ledger import UsageLedger
from workledger.domains.usage.service import UsageService
from workledger.models import Client, Task
from workledger.schemas.principal import Principal

DEFAULT_CLIENT_ID = UUID("00000000-0000-0000-0000-000000000001")
OTHER_CLIENT_ID = UUID("00000000-0000-0000-0000-000000000002")
ACTOR_ID = UUID("00000000-0000-0000-0000-0000000000aa")
CYCLE_START = date(2024, 3, 1)

# 23:30 UTC on June 30 is already July 1 on a UTC+14 host.
LATE_UTC_INSTANT = datetime(2030, 6, 30, 23, 30, tzinfo=timezone.utc)
UTC_PLUS_14 = timezone(timedelta(hours=14))


class UtcPlus14Clock(datetime):
    """Frozen clock on a host whose local date runs ahead of UTC."""

    @classmethod
    def now(cls, tz=None):
        if tz is None:
            return LATE_UTC_INSTANT.astimezone(UTC_PLUS_14).replace(tzinfo=None)
        return LATE_UTC_INSTANT.astimezone(tz)


@pytest.fixture
def utc_plus_14_clock(monkeypatch):
    """Freeze the usage-domain clock at ``LATE_UTC_INSTANT``."""
    monkeypatch.setattr("workledger.domains.usage.types.datetime", UtcPlus14Clock)
    return LATE_UTC_INSTANT


def _at(day: date, hour: int = 12) -> datetime:
    return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)


def _make_ctx(
    role: PrincipalRole = PrincipalRole.ADMIN, client_ids: Optional[list[UUID]] = None
) -> BaseContext:
    return BaseContext(
        principal=Principal(
            id=ACTOR_ID,
            role=role,
            client_ids=client_ids if client_ids is not None else [DEFAULT_CLIENT_ID],
        )
    )


def _make_client(
    client_id: UUID = DEFAULT_CLIENT_ID,
    *,
    name: str = "Acme",
    plan_code: Optional[str] = "starter",
    hours_monthly: int = 40,
    cycle_start: date = CYCLE_START,
) -> Client:
    return Client(
        id=client_id,
        name=name,
        plan_code=plan_code,
        hours_monthly=hours_monthly,
        hours_used_month=0.0,
        cycle_start=cycle_start,
    )


def _make_task(task_id: UUID, client_id: UUID = DEFAULT_CLIENT_ID) -> Task:
    return Task(
        id=task_id,
        client_id=client_id,
        title="Fix login",
        priority="medium",
        status="in_progress",
        position=0,
        hours_spent=None,
    )


class UsageHarness:
    """Real ledger, aggregator and service wired to in-memory fakes."""

    def __init__(self) -> None:
        self.db = AsyncMock()
        self.usage = FakeUsageLogRepository()
        self.clients = FakeClientRepository()
        self.tasks = FakeTaskRepository()
        self.plans = FakePlanRepository()
        self.access = FakeAccessPolicy()
        self.ledger = UsageLedger(self.usage, self.clients, self.tasks)
        self.aggregator = UsageAggregator(self.usage, self.clients, self.plans, recap_days=7)
        self.service = UsageService(self.ledger, self.aggregator, self.clients, self.access)
        self.clients.seed(_make_client())


@pytest.fixture
def harness() -> UsageHarness:
    return UsageHarness()

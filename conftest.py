"""Root conftest for pytest configuration and shared fixtures.

This conftest is loaded before both testpaths (tests/ and workledger/),
making its fixtures available to centralized tests AND colocated domain tests.
"""

import os
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables: must be set before any workledger module import
# Uses setdefault so real env vars (CI) are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_USER", "test_user")
os.environ.setdefault("POSTGRES_PASSWORD", "test_password")
os.environ.setdefault("POSTGRES_DB", "test_db")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("TESTING", "true")


# ---------------------------------------------------------------------------
# Shared fake fixtures: individual protocol fakes
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_task_repo():
    """In-memory task repository."""
    from workledger.domains.tasks.fakes.repository import FakeTaskRepository

    return FakeTaskRepository()


@pytest.fixture
def fake_client_repo():
    """In-memory client repository."""
    from workledger.domains.clients.fakes.repository import FakeClientRepository

    return FakeClientRepository()


@pytest.fixture
def fake_usage_repo():
    """In-memory usage ledger repository."""
    from workledger.domains.usage.fakes.repository import FakeUsageLogRepository

    return FakeUsageLogRepository()


@pytest.fixture
def fake_plan_repo():
    """Plan repository seeded with the default plans."""
    from workledger.domains.billing.fakes.repository import FakePlanRepository

    return FakePlanRepository()


@pytest.fixture
def test_container(fake_task_repo, fake_client_repo, fake_usage_repo, fake_plan_repo):
    """A Container whose services run over in-memory repositories.

    The services, sequencer, state machine and access policy are the real
    implementations; only persistence is faked. For partial overrides use
    ``test_container.replace(...)``.
    """
    from workledger.core.config import CycleResetMode
    from workledger.core.container import Container
    from workledger.domains.access.policy import RoleAccessPolicy
    from workledger.domains.billing.cycle_resetter import CycleResetter
    from workledger.domains.billing.price_lookup import PriceLookup
    from workledger.domains.billing.subscription_sync import SubscriptionSync
    from workledger.domains.tasks.locks import ClientLockRegistry
    from workledger.domains.tasks.sequencer import TaskSequencer
    from workledger.domains.tasks.service import TaskService
    from workledger.domains.tasks.state_machine import TaskStateMachine
    from workledger.domains.usage.aggregator import UsageAggregator
    from workledger.domains.usage.ledger import UsageLedger
    from workledger.domains.usage.service import UsageService

    @asynccontextmanager
    async def _session_factory():
        yield AsyncMock()

    access = RoleAccessPolicy()
    ledger = UsageLedger(
        usage_repo=fake_usage_repo, client_repo=fake_client_repo, task_repo=fake_task_repo
    )
    aggregator = UsageAggregator(
        usage_repo=fake_usage_repo, client_repo=fake_client_repo, plan_repo=fake_plan_repo
    )
    locks = ClientLockRegistry()
    sequencer = TaskSequencer(task_repo=fake_task_repo, client_repo=fake_client_repo, locks=locks)
    state_machine = TaskStateMachine(
        task_repo=fake_task_repo,
        client_repo=fake_client_repo,
        sequencer=sequencer,
        ledger=ledger,
        locks=locks,
        session_factory=_session_factory,
    )
    price_lookup = PriceLookup(plan_repo=fake_plan_repo, price_references={})

    return Container(
        task_service=TaskService(
            task_repo=fake_task_repo,
            client_repo=fake_client_repo,
            state_machine=state_machine,
            sequencer=sequencer,
            access=access,
        ),
        usage_service=UsageService(
            ledger=ledger, aggregator=aggregator, client_repo=fake_client_repo, access=access
        ),
        usage_ledger=ledger,
        usage_aggregator=aggregator,
        subscription_sync=SubscriptionSync(client_repo=fake_client_repo, price_lookup=price_lookup),
        cycle_resetter=CycleResetter(
            client_repo=fake_client_repo, mode=CycleResetMode.ON_OR_BEFORE
        ),
        price_lookup=price_lookup,
        access_policy=access,
    )

"""Billing domain test fixtures and helpers."""

from datetime import date
from typing import Optional
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from workledger.core.config.enums import CycleResetMode
from workledger.core.context import SystemContext
from workledger.core.shared_models import AuthMethod
from workledger.domains.billing.cycle_resetter import CycleResetter
from workledger.domains.billing.fakes.repository import FakePlanRepository
from workledger.domains.billing.price_lookup import PriceLookup
from workledger.domains.billing.subscription_sync import SubscriptionSync
from workledger.domains.clients.fakes.repository import FakeClientRepository
from workledger.models import Client
from workledger.schemas.billing import BillingEvent, BillingEventType, SubscriptionStatus

DEFAULT_CLIENT_ID = UUID("00000000-0000-0000-0000-000000000001")
CUSTOMER_REF = "cus_123"
TODAY = date(2024, 4, 15)

PRICE_TABLE = {
    "price_starter_live": "starter",
    "price_growth_live": "growth",
    "price_scale_live": "scale",
    "price_dedicated_live": "dedicated",
}


def _make_ctx() -> SystemContext:
    return SystemContext.for_job("billing-events", source=AuthMethod.BILLING_EVENT)


def _make_client(
    client_id: UUID = DEFAULT_CLIENT_ID,
    *,
    customer_ref: Optional[str] = CUSTOMER_REF,
    plan_code: Optional[str] = "starter",
    hours_monthly: int = 40,
    hours_used_month: float = 12.0,
    cycle_start: date = date(2024, 3, 15),
) -> Client:
    return Client(
        id=client_id,
        name="Acme",
        plan_code=plan_code,
        hours_monthly=hours_monthly,
        hours_used_month=hours_used_month,
        cycle_start=cycle_start,
        payment_customer_ref=customer_ref,
    )


def _event(
    type: BillingEventType,
    price: Optional[str] = None,
    status: Optional[SubscriptionStatus] = None,
    *,
    customer_ref: str = CUSTOMER_REF,
    client_name: Optional[str] = None,
) -> BillingEvent:
    return BillingEvent(
        type=type,
        customer_reference=customer_ref,
        price_reference=price,
        subscription_status=status,
        client_name=client_name,
    )


class BillingHarness:
    """Subscription sync and cycle resetter wired to in-memory fakes."""

    def __init__(self, mode: CycleResetMode = CycleResetMode.ON_OR_BEFORE) -> None:
        self.db = AsyncMock()
        self.clients = FakeClientRepository()
        self.plans = FakePlanRepository()
        self.price_lookup = PriceLookup(self.plans, PRICE_TABLE)
        self.sync = SubscriptionSync(self.clients, self.price_lookup, today=lambda: TODAY)
        self.resetter = CycleResetter(self.clients, mode=mode)


@pytest.fixture
def harness() -> BillingHarness:
    return BillingHarness()

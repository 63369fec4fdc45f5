"""Billing domain protocols.

SubscriptionSyncProtocol: applies normalized payment events to clients.
CycleResetterProtocol: scheduled zeroing of consumption.
PriceLookupProtocol: resolves payment price references to plans.
"""

from datetime import date
from typing import Optional, Protocol, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.core.context import BaseContext
from workledger.models import Plan


@runtime_checkable
class PriceLookupProtocol(Protocol):
    """Maps a payment-provider price reference to a plan."""

    async def resolve(self, db: AsyncSession, price_reference: Optional[str]) -> Optional[Plan]:
        """Return the plan for *price_reference*, or None when unknown."""
        ...


@runtime_checkable
class SubscriptionSyncProtocol(Protocol):
    """Consumes billing events. Every effect is an unconditional set."""

    async def handle(
        self, db: AsyncSession, event: schemas.BillingEvent, ctx: BaseContext
    ) -> schemas.BillingEventAck:
        """Apply one event. Unknown references are skipped, not rejected."""
        ...


@runtime_checkable
class CycleResetterProtocol(Protocol):
    """Starts new billing cycles."""

    async def reset(
        self, db: AsyncSession, ctx: BaseContext, today: Optional[date] = None
    ) -> schemas.CycleResetResult:
        """Zero consumption and restart the cycle for every due client."""
        ...

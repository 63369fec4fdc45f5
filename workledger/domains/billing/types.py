"""Billing domain types and pure business logic.

Price fallbacks, subscription status classification and reset selection.
No IO.
"""

from datetime import date
from typing import Iterable, List, Optional, Protocol

from dateutil.relativedelta import relativedelta

from workledger.core.config.enums import CycleResetMode
from workledger.schemas.billing import SubscriptionStatus

# Used when no PRICE_* setting is configured.
FALLBACK_PRICE_REFERENCES: dict[str, str] = {
    "price_starter": "starter",
    "price_growth": "growth",
    "price_scale": "scale",
    "price_dedicated": "dedicated",
}

# Statuses that switch capacity off.
DEACTIVATING_STATUSES: frozenset[SubscriptionStatus] = frozenset(
    {
        SubscriptionStatus.CANCELED,
        SubscriptionStatus.PAST_DUE,
        SubscriptionStatus.UNPAID,
        SubscriptionStatus.INCOMPLETE_EXPIRED,
    }
)

DEFAULT_CLIENT_NAME = "New Client"


class Resettable(Protocol):
    """Anything with a billing cycle start."""

    cycle_start: date


def is_deactivating(status: Optional[SubscriptionStatus]) -> bool:
    """Whether a subscription in *status* should have its capacity switched off."""
    return status in DEACTIVATING_STATUSES


def is_due_for_reset(cycle_start: date, today: date, mode: CycleResetMode) -> bool:
    """Whether a cycle starting on *cycle_start* resets on *today*.

    ``on_or_before`` resets every cycle that has started. ``anniversary``
    resets only cycles at least one calendar month old.
    """
    if mode == CycleResetMode.ANNIVERSARY:
        return cycle_start + relativedelta(months=1) <= today
    return cycle_start <= today


def select_for_reset(
    clients: Iterable[Resettable], today: date, mode: CycleResetMode
) -> List[Resettable]:
    """Clients whose cycle resets on *today* under *mode*."""
    return [c for c in clients if is_due_for_reset(c.cycle_start, today, mode)]

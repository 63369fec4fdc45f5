"""Unit tests for billing domain pure logic."""

from dataclasses import dataclass
from datetime import date

import pytest

from workledger.core.config.enums import CycleResetMode
from workledger.domains.billing.types import is_deactivating, is_due_for_reset, select_for_reset
from workledger.schemas.billing import SubscriptionStatus


@pytest.mark.parametrize(
    "status,expected",
    [
        (SubscriptionStatus.CANCELED, True),
        (SubscriptionStatus.PAST_DUE, True),
        (SubscriptionStatus.UNPAID, True),
        (SubscriptionStatus.INCOMPLETE_EXPIRED, True),
        (SubscriptionStatus.ACTIVE, False),
        (SubscriptionStatus.TRIALING, False),
        (None, False),
    ],
)
def test_is_deactivating(status, expected):
    assert is_deactivating(status) is expected


@pytest.mark.parametrize(
    "cycle_start,mode,expected",
    [
        (date(2024, 4, 15), CycleResetMode.ON_OR_BEFORE, True),
        (date(2024, 4, 1), CycleResetMode.ON_OR_BEFORE, True),
        (date(2024, 4, 16), CycleResetMode.ON_OR_BEFORE, False),
        (date(2024, 3, 15), CycleResetMode.ANNIVERSARY, True),
        (date(2024, 3, 16), CycleResetMode.ANNIVERSARY, False),
        (date(2024, 4, 15), CycleResetMode.ANNIVERSARY, False),
    ],
)
def test_is_due_for_reset(cycle_start, mode, expected):
    assert is_due_for_reset(cycle_start, date(2024, 4, 15), mode) is expected


def test_anniversary_of_month_end_clamps():
    # Jan 31 + 1 month = Feb 29 in a leap year
    assert is_due_for_reset(date(2024, 1, 31), date(2024, 2, 29), CycleResetMode.ANNIVERSARY)


@dataclass
class _C:
    cycle_start: date


def test_select_for_reset_filters_by_mode():
    clients = [_C(date(2024, 3, 1)), _C(date(2024, 4, 10))]
    today = date(2024, 4, 12)

    assert select_for_reset(clients, today, CycleResetMode.ON_OR_BEFORE) == clients
    assert select_for_reset(clients, today, CycleResetMode.ANNIVERSARY) == clients[:1]

"""Usage domain types and pure business logic.

Billing-cycle window, percent-used and risk thresholds. No IO.

Cycles are anchored on UTC calendar dates; anything that sets a
``cycle_start`` must take the date from ``utc_today``.
"""

from datetime import date, datetime, time, timezone
from typing import Tuple

from dateutil.relativedelta import relativedelta

from workledger.core.shared_models import RiskFlag

MEDIUM_RISK_PCT = 80.0
HIGH_RISK_PCT = 100.0


def utc_today() -> date:
    """Current date in UTC, the calendar billing cycles are anchored on."""
    return datetime.now(timezone.utc).date()


def cycle_window(cycle_start: date) -> Tuple[datetime, datetime]:
    """Half-open ``[start, end)`` UTC window of the cycle starting on *cycle_start*.

    The end is one calendar month later, clamped to the last day of a shorter
    month (Jan 31 -> Feb 28).
    """
    start = datetime.combine(cycle_start, time.min, tzinfo=timezone.utc)
    return start, start + relativedelta(months=1)


def percent_used(hours_used: float, hours_monthly: int) -> Tuple[float, bool]:
    """Return ``(pct_used, capacity_disabled)``.

    A plan with zero monthly hours has capacity disabled and reports 0%.
    """
    if hours_monthly <= 0:
        return 0.0, True
    return hours_used / hours_monthly * 100, False


def classify_risk(pct_used: float) -> RiskFlag:
    """Classify consumption: below 80% low, below 100% medium, otherwise high."""
    if pct_used < MEDIUM_RISK_PCT:
        return RiskFlag.LOW
    if pct_used < HIGH_RISK_PCT:
        return RiskFlag.MEDIUM
    return RiskFlag.HIGH

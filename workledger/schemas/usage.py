"""Usage ledger and aggregate schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from workledger.core.shared_models import RiskFlag


class UsageLogCreate(BaseModel):
    """Append request for the usage ledger."""

    client_id: UUID
    task_id: Optional[UUID] = None
    hours: float = Field(..., gt=0)


class UsageLog(BaseModel):
    """Ledger entry as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: UUID
    task_id: Optional[UUID] = None
    hours: float
    logged_by: Optional[UUID] = None
    logged_at: datetime


class ClientUsage(BaseModel):
    """Consumption of one client in its current billing cycle."""

    client_id: UUID
    cycle_start: date
    cycle_end: date
    hours_monthly: int
    hours_used: float
    pct_used: float
    capacity_disabled: bool
    risk_flag: RiskFlag


class WeeklyUsageSummary(BaseModel):
    """Hours logged by one client over the recap window."""

    client_id: UUID
    client_name: str
    plan_name: str
    total_hours: float
    task_count: int


class WeeklyRecap(BaseModel):
    """Weekly recap over all clients."""

    ok: bool = True
    since: datetime
    summaries: list[WeeklyUsageSummary]

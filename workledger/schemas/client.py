"""Client schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ClientCreate(BaseModel):
    """Fields for a client created at checkout."""

    name: str = Field(..., min_length=1)
    plan_code: Optional[str] = None
    hours_monthly: int = Field(0, ge=0)
    cycle_start: date
    payment_customer_ref: Optional[str] = None


class ClientUpdate(BaseModel):
    """Partial client update. Every field is an unconditional set."""

    plan_code: Optional[str] = None
    hours_monthly: Optional[int] = Field(None, ge=0)
    hours_used_month: Optional[float] = Field(None, ge=0)
    cycle_start: Optional[date] = None


class Client(BaseModel):
    """Client as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    plan_code: Optional[str] = None
    hours_monthly: int
    hours_used_month: float
    cycle_start: date
    payment_customer_ref: Optional[str] = None
    created_at: datetime

"""Normalized billing event schemas."""

from datetime import date
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class BillingEventType(str, Enum):
    """Billing event types the subscription sync understands."""

    CHECKOUT_COMPLETED = "checkout_completed"
    SUBSCRIPTION_UPDATED = "subscription_updated"
    SUBSCRIPTION_DELETED = "subscription_deleted"
    INVOICE_PAID = "invoice_paid"
    INVOICE_PAYMENT_FAILED = "invoice_payment_failed"


class SubscriptionStatus(str, Enum):
    """Subscription statuses reported by the payment provider."""

    ACTIVE = "active"
    TRIALING = "trialing"
    INCOMPLETE = "incomplete"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    UNPAID = "unpaid"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    PAUSED = "paused"


class BillingEvent(BaseModel):
    """A verified, normalized payment-provider event."""

    type: BillingEventType
    customer_reference: str = Field(..., min_length=1)
    price_reference: Optional[str] = None
    subscription_status: Optional[SubscriptionStatus] = None
    client_name: Optional[str] = Field(
        None, description="Display name for a client created at checkout"
    )


class BillingEventAck(BaseModel):
    """Acknowledgement returned for every billing event, applied or skipped."""

    received: bool = True
    applied: bool
    detail: Optional[str] = None


class CycleResetResult(BaseModel):
    """Outcome of one billing cycle reset run."""

    reset_count: int
    affected_client_ids: List[UUID]
    reset_date: date

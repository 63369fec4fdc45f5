"""Schemas for the application."""

from .billing import (
    BillingEvent,
    BillingEventAck,
    BillingEventType,
    CycleResetResult,
    SubscriptionStatus,
)
from .client import Client, ClientCreate, ClientUpdate
from .errors import BadRequestErrorResponse, ConflictErrorResponse, NotFoundErrorResponse
from .plan import Plan
from .principal import Principal
from .task import (
    Task,
    TaskCreate,
    TaskReorderItem,
    TaskReorderRequest,
    TaskReorderResponse,
    TaskSubmit,
    TaskUpdate,
)
from .usage import ClientUsage, UsageLog, UsageLogCreate, WeeklyRecap, WeeklyUsageSummary

__all__ = [
    "BadRequestErrorResponse",
    "BillingEvent",
    "BillingEventAck",
    "BillingEventType",
    "Client",
    "ClientCreate",
    "ClientUpdate",
    "ClientUsage",
    "ConflictErrorResponse",
    "CycleResetResult",
    "NotFoundErrorResponse",
    "Plan",
    "Principal",
    "SubscriptionStatus",
    "Task",
    "TaskCreate",
    "TaskReorderItem",
    "TaskReorderRequest",
    "TaskReorderResponse",
    "TaskSubmit",
    "TaskUpdate",
    "UsageLog",
    "UsageLogCreate",
    "WeeklyRecap",
    "WeeklyUsageSummary",
]

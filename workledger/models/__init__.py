"""Models for the application."""

from .client import Client
from .plan import Plan
from .task import Task
from .usage_log import UsageLog

__all__ = [
    "Client",
    "Plan",
    "Task",
    "UsageLog",
]

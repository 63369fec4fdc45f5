"""Shared models for the backend."""

from enum import Enum


class TaskStatus(str, Enum):
    """Task status enum."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskPriority(str, Enum):
    """Task priority enum."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskFlag(str, Enum):
    """Consumption risk relative to plan capacity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PrincipalRole(str, Enum):
    """Role of the acting principal.

    ADMIN and PM act across clients; CLIENT and DEV act only on the clients
    they are members of.
    """

    ADMIN = "admin"
    PM = "pm"
    DEV = "dev"
    CLIENT = "client"


class AuthMethod(str, Enum):
    """How the acting principal was established."""

    GATEWAY = "gateway"
    SYSTEM = "system"
    CRON = "cron"
    BILLING_EVENT = "billing_event"

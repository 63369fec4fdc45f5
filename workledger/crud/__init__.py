"""CRUD layer operations."""

from .crud_client import client
from .crud_plan import plan
from .crud_task import task
from .crud_usage_log import usage_log

__all__ = ["client", "plan", "task", "usage_log"]

"""Fake sequencer for testing."""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workledger.core.shared_models import TaskStatus


class FakeTaskSequencer:
    """In-memory fake for TaskSequencerProtocol that records calls."""

    def __init__(self, next_position: int = 0) -> None:
        """Initialize with the position ``next_position`` returns."""
        self._next_position = next_position
        self._calls: list[tuple] = []

    async def next_position(self, db: AsyncSession, client_id: UUID, status: TaskStatus) -> int:
        """Return the configured position."""
        self._calls.append(("next_position", client_id, status))
        return self._next_position

    async def reorder(
        self, db: AsyncSession, client_id: UUID, status: TaskStatus, order: Sequence
    ) -> int:
        """Record the batch and report it as applied."""
        self._calls.append(("reorder", client_id, status, list(order)))
        return len(order)

"""Per-client locks that serialize task writes inside one process."""

import asyncio
import weakref
from uuid import UUID


class ClientLockRegistry:
    """Hands out one ``asyncio.Lock`` per client.

    Only covers this process. Across processes the client row lock and the
    partial unique index do the same job.

    Locks are held weakly: a lock lives as long as some coroutine holds or
    awaits it, so the registry only ever contains clients with writes in
    flight.
    """

    def __init__(self) -> None:
        """Initialize with no locks."""
        self._locks: "weakref.WeakValueDictionary[UUID, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def __len__(self) -> int:
        """Number of clients that currently have a live lock."""
        return len(self._locks)

    def get(self, client_id: UUID) -> asyncio.Lock:
        """Return the lock for *client_id*, creating it when none is live."""
        lock = self._locks.get(client_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[client_id] = lock
        return lock

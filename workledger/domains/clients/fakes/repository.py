"""Fake client repository for testing."""

from datetime import date, datetime, timezone
from typing import List, Optional, Sequence
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from workledger.models import Client


class FakeClientRepository:
    """In-memory fake for ClientRepositoryProtocol."""

    def __init__(self) -> None:
        """Initialize with empty store and call log."""
        self._store: dict[UUID, Client] = {}
        self._calls: list[tuple] = []

    def seed(self, *clients: Client) -> None:
        """Populate store with test data."""
        for obj in clients:
            self._store[obj.id] = obj

    def all(self) -> List[Client]:
        """Every stored client, in insertion order."""
        return list(self._store.values())

    async def get(self, db: AsyncSession, client_id: UUID) -> Optional[Client]:
        """Get a client by ID."""
        self._calls.append(("get", client_id))
        return self._store.get(client_id)

    async def get_for_update(self, db: AsyncSession, client_id: UUID) -> Optional[Client]:
        """Get a client by ID (no row locking in memory)."""
        self._calls.append(("get_for_update", client_id))
        return self._store.get(client_id)

    async def get_many(
        self, db: AsyncSession, client_ids: Optional[Sequence[UUID]] = None
    ) -> List[Client]:
        """Get the given clients, or all of them."""
        self._calls.append(("get_many", client_ids))
        if client_ids is None:
            return self.all()
        wanted = set(client_ids)
        return [c for c in self._store.values() if c.id in wanted]

    async def get_by_customer_ref(
        self, db: AsyncSession, payment_customer_ref: str
    ) -> Optional[Client]:
        """Get a client by its payment-provider customer reference."""
        self._calls.append(("get_by_customer_ref", payment_customer_ref))
        for obj in self._store.values():
            if obj.payment_customer_ref == payment_customer_ref:
                return obj
        return None

    async def get_with_cycle_start_on_or_before(
        self, db: AsyncSession, cutoff: date
    ) -> List[Client]:
        """Get clients whose cycle started on or before *cutoff*."""
        self._calls.append(("get_with_cycle_start_on_or_before", cutoff))
        return [c for c in self._store.values() if c.cycle_start <= cutoff]

    async def create(self, db: AsyncSession, *, obj_in: object, uow: object = None) -> Client:
        """Create a client (fake)."""
        self._calls.append(("create", obj_in, uow))
        values = obj_in.model_dump()  # type: ignore[union-attr]
        client = Client(
            id=uuid4(),
            hours_used_month=0.0,
            created_at=datetime.now(timezone.utc),
            **values,
        )
        self._store[client.id] = client
        return client

    async def update(
        self, db: AsyncSession, *, db_obj: Client, obj_in: object, uow: object = None
    ) -> Client:
        """Update a client (fake)."""
        self._calls.append(("update", db_obj.id, obj_in, uow))
        if hasattr(obj_in, "model_dump"):
            updates = obj_in.model_dump(exclude_unset=True)
        elif isinstance(obj_in, dict):
            updates = obj_in
        else:
            updates = {}
        for key, value in updates.items():
            setattr(db_obj, key, value)
        return db_obj

    async def set_hours_used(
        self, db: AsyncSession, *, client_id: UUID, hours_used: float, uow: object = None
    ) -> None:
        """Overwrite cached consumption (fake)."""
        self._calls.append(("set_hours_used", client_id, hours_used))
        if client_id in self._store:
            self._store[client_id].hours_used_month = hours_used

    async def reset_cycle(
        self,
        db: AsyncSession,
        *,
        client_ids: Sequence[UUID],
        cycle_start: date,
        uow: object = None,
    ) -> int:
        """Reset the cycle of the given clients (fake)."""
        self._calls.append(("reset_cycle", list(client_ids), cycle_start))
        count = 0
        for client_id in client_ids:
            obj = self._store.get(client_id)
            if obj is None:
                continue
            obj.hours_used_month = 0.0
            obj.cycle_start = cycle_start
            count += 1
        return count

"""Client repository."""

from datetime import date
from typing import List, Optional, Protocol, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import crud
from workledger.db.unit_of_work import UnitOfWork
from workledger.models import Client
from workledger.schemas.client import ClientCreate, ClientUpdate


class ClientRepositoryProtocol(Protocol):
    """Data access for clients."""

    async def get(self, db: AsyncSession, client_id: UUID) -> Optional[Client]:
        """Get a client by ID."""
        ...

    async def get_for_update(self, db: AsyncSession, client_id: UUID) -> Optional[Client]:
        """Get a client by ID, locking its row for the current transaction."""
        ...

    async def get_many(
        self, db: AsyncSession, client_ids: Optional[Sequence[UUID]] = None
    ) -> List[Client]:
        """Get the given clients, or all clients when *client_ids* is None."""
        ...

    async def get_by_customer_ref(
        self, db: AsyncSession, payment_customer_ref: str
    ) -> Optional[Client]:
        """Get a client by its payment-provider customer reference."""
        ...

    async def get_with_cycle_start_on_or_before(
        self, db: AsyncSession, cutoff: date
    ) -> List[Client]:
        """Get clients whose cycle started on or before *cutoff*."""
        ...

    async def create(
        self, db: AsyncSession, *, obj_in: ClientCreate, uow: Optional[UnitOfWork] = None
    ) -> Client:
        """Create a client."""
        ...

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: Client,
        obj_in: ClientUpdate,
        uow: Optional[UnitOfWork] = None,
    ) -> Client:
        """Set fields on a client."""
        ...

    async def set_hours_used(
        self,
        db: AsyncSession,
        *,
        client_id: UUID,
        hours_used: float,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Overwrite the cached consumption of the current cycle."""
        ...

    async def reset_cycle(
        self,
        db: AsyncSession,
        *,
        client_ids: Sequence[UUID],
        cycle_start: date,
        uow: Optional[UnitOfWork] = None,
    ) -> int:
        """Zero consumption and restart the cycle for the given clients."""
        ...


class ClientRepository(ClientRepositoryProtocol):
    """Delegates to the crud.client singleton."""

    async def get(self, db: AsyncSession, client_id: UUID) -> Optional[Client]:
        """Get a client by ID."""
        return await crud.client.get(db, client_id)

    async def get_for_update(self, db: AsyncSession, client_id: UUID) -> Optional[Client]:
        """Get a client by ID, locking its row for the current transaction."""
        return await crud.client.get_for_update(db, client_id)

    async def get_many(
        self, db: AsyncSession, client_ids: Optional[Sequence[UUID]] = None
    ) -> List[Client]:
        """Get the given clients, or all clients when *client_ids* is None."""
        return await crud.client.get_multi(db, ids=client_ids)

    async def get_by_customer_ref(
        self, db: AsyncSession, payment_customer_ref: str
    ) -> Optional[Client]:
        """Get a client by its payment-provider customer reference."""
        return await crud.client.get_by_customer_ref(
            db, payment_customer_ref=payment_customer_ref
        )

    async def get_with_cycle_start_on_or_before(
        self, db: AsyncSession, cutoff: date
    ) -> List[Client]:
        """Get clients whose cycle started on or before *cutoff*."""
        return await crud.client.get_with_cycle_start_on_or_before(db, cutoff=cutoff)

    async def create(
        self, db: AsyncSession, *, obj_in: ClientCreate, uow: Optional[UnitOfWork] = None
    ) -> Client:
        """Create a client."""
        return await crud.client.create(db, obj_in=obj_in, uow=uow)

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: Client,
        obj_in: ClientUpdate,
        uow: Optional[UnitOfWork] = None,
    ) -> Client:
        """Set fields on a client."""
        return await crud.client.update(db, db_obj=db_obj, obj_in=obj_in, uow=uow)

    async def set_hours_used(
        self,
        db: AsyncSession,
        *,
        client_id: UUID,
        hours_used: float,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Overwrite the cached consumption of the current cycle."""
        await crud.client.set_hours_used(db, client_id=client_id, hours_used=hours_used, uow=uow)

    async def reset_cycle(
        self,
        db: AsyncSession,
        *,
        client_ids: Sequence[UUID],
        cycle_start: date,
        uow: Optional[UnitOfWork] = None,
    ) -> int:
        """Zero consumption and restart the cycle for the given clients."""
        return await crud.client.reset_cycle(
            db, client_ids=client_ids, cycle_start=cycle_start, uow=uow
        )

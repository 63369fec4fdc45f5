"""CRUD operations for Client model."""

from datetime import date
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from workledger.crud._base import CRUDBase
from workledger.db.unit_of_work import UnitOfWork
from workledger.models.client import Client
from workledger.schemas.client import ClientCreate, ClientUpdate


class CRUDClient(CRUDBase[Client, ClientCreate, ClientUpdate]):
    """CRUD operations for Client model."""

    async def get_by_customer_ref(
        self, db: AsyncSession, *, payment_customer_ref: str
    ) -> Optional[Client]:
        """Get a client by its payment-provider customer reference."""
        result = await db.execute(
            select(Client).where(Client.payment_customer_ref == payment_customer_ref)
        )
        return result.scalar_one_or_none()

    async def get_with_cycle_start_on_or_before(
        self, db: AsyncSession, *, cutoff: date
    ) -> List[Client]:
        """Get every client whose cycle started on or before *cutoff*."""
        result = await db.execute(
            select(Client).where(Client.cycle_start <= cutoff).order_by(Client.cycle_start)
        )
        return list(result.scalars().all())

    async def set_hours_used(
        self,
        db: AsyncSession,
        *,
        client_id: UUID,
        hours_used: float,
        uow: Optional[UnitOfWork] = None,
    ) -> None:
        """Overwrite the cached consumption for the current cycle."""
        await db.execute(
            update(Client).where(Client.id == client_id).values(hours_used_month=hours_used)
        )
        await self._persist(db, uow)

    async def reset_cycle(
        self,
        db: AsyncSession,
        *,
        client_ids: Sequence[UUID],
        cycle_start: date,
        uow: Optional[UnitOfWork] = None,
    ) -> int:
        """Zero consumption and start a new cycle for the given clients."""
        if not client_ids:
            return 0
        result = await db.execute(
            update(Client)
            .where(Client.id.in_(list(client_ids)))
            .values(hours_used_month=0.0, cycle_start=cycle_start)
        )
        await self._persist(db, uow)
        return result.rowcount


client = CRUDClient(Client)

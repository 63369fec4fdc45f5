"""Plan repository."""

from typing import List, Optional, Protocol, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import crud
from workledger.models import Plan


class PlanRepositoryProtocol(Protocol):
    """Read-only access to plan reference data."""

    async def get_by_code(self, db: AsyncSession, *, code: str) -> Optional[Plan]:
        """Get a plan by code."""
        ...

    async def get_by_codes(self, db: AsyncSession, *, codes: Sequence[str]) -> List[Plan]:
        """Get every plan whose code is in *codes*."""
        ...


class PlanRepository(PlanRepositoryProtocol):
    """Delegates to the crud.plan singleton."""

    async def get_by_code(self, db: AsyncSession, *, code: str) -> Optional[Plan]:
        """Get a plan by code."""
        return await crud.plan.get_by_code(db, code=code)

    async def get_by_codes(self, db: AsyncSession, *, codes: Sequence[str]) -> List[Plan]:
        """Get every plan whose code is in *codes*."""
        if not codes:
            return []
        return await crud.plan.get_by_codes(db, codes=codes)

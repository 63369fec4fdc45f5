"""CRUD operations for Plan model."""

from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workledger.crud._base import CRUDBase
from workledger.models.plan import Plan
from workledger.schemas.plan import Plan as PlanSchema


class CRUDPlan(CRUDBase[Plan, PlanSchema, PlanSchema]):
    """Read access to plan reference data."""

    async def get_by_code(self, db: AsyncSession, *, code: str) -> Optional[Plan]:
        """Get a plan by its code."""
        result = await db.execute(select(Plan).where(Plan.code == code))
        return result.scalar_one_or_none()

    async def get_by_codes(self, db: AsyncSession, *, codes: Sequence[str]) -> List[Plan]:
        """Get all plans whose code is in *codes*."""
        result = await db.execute(select(Plan).where(Plan.code.in_(list(codes))))
        return list(result.scalars().all())


plan = CRUDPlan(Plan)

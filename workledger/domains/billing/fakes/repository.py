"""Fake plan repository for testing."""

from typing import List, Optional, Sequence
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from workledger.models import Plan

DEFAULT_PLANS = {
    "starter": ("Starter", 40),
    "growth": ("Growth", 80),
    "scale": ("Scale", 120),
    "dedicated": ("Dedicated", 160),
}


class FakePlanRepository:
    """In-memory fake for PlanRepositoryProtocol, seeded with the default plans."""

    def __init__(self, with_defaults: bool = True) -> None:
        """Initialize the store, optionally with the default plan table."""
        self._store: dict[str, Plan] = {}
        self._calls: list[tuple] = []
        if with_defaults:
            for code, (name, hours) in DEFAULT_PLANS.items():
                self.seed(Plan(id=uuid4(), code=code, name=name, hours_monthly=hours))

    def seed(self, *plans: Plan) -> None:
        """Populate store with test data."""
        for plan in plans:
            self._store[plan.code] = plan

    async def get_by_code(self, db: AsyncSession, *, code: str) -> Optional[Plan]:
        """Get a plan by code."""
        self._calls.append(("get_by_code", code))
        return self._store.get(code)

    async def get_by_codes(self, db: AsyncSession, *, codes: Sequence[str]) -> List[Plan]:
        """Get every plan whose code is in *codes*."""
        self._calls.append(("get_by_codes", set(codes)))
        return [self._store[c] for c in codes if c in self._store]

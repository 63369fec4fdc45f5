"""Price lookup: payment price references to plan reference data."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from workledger.domains.billing.protocols import PriceLookupProtocol
from workledger.domains.billing.repository import PlanRepositoryProtocol
from workledger.domains.billing.types import FALLBACK_PRICE_REFERENCES
from workledger.models import Plan

logger = logging.getLogger(__name__)


class PriceLookup(PriceLookupProtocol):
    """Resolves price references through a fixed ``price -> plan code`` table."""

    def __init__(
        self, plan_repo: PlanRepositoryProtocol, price_references: dict[str, str]
    ) -> None:
        """Initialize with the configured table; empty means use the fallback."""
        self._plan_repo = plan_repo
        self._using_fallback = not price_references
        self._price_references = dict(price_references or FALLBACK_PRICE_REFERENCES)
        self._fallback_warned = False

    @property
    def price_references(self) -> dict[str, str]:
        """The active ``price -> plan code`` table."""
        return dict(self._price_references)

    async def resolve(self, db: AsyncSession, price_reference: Optional[str]) -> Optional[Plan]:
        """Return the plan for *price_reference*, or None when it is unknown."""
        if self._using_fallback and not self._fallback_warned:
            logger.warning(
                "No PRICE_* settings configured; using fallback price references %s",
                sorted(self._price_references),
            )
            self._fallback_warned = True

        if not price_reference:
            return None
        code = self._price_references.get(price_reference)
        if code is None:
            return None
        return await self._plan_repo.get_by_code(db, code=code)

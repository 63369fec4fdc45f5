"""Principal schema: the identity an upstream gateway hands to the core."""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from workledger.core.shared_models import PrincipalRole


class Principal(BaseModel):
    """Acting principal for an operation."""

    id: Optional[UUID] = Field(None, description="User ID, absent for system actors")
    role: PrincipalRole
    client_ids: List[UUID] = Field(
        default_factory=list, description="Clients the principal is a member of"
    )

    @property
    def is_staff(self) -> bool:
        """Whether the principal acts across clients."""
        return self.role in (PrincipalRole.ADMIN, PrincipalRole.PM)

    @classmethod
    def system(cls) -> "Principal":
        """Principal used by scheduled jobs and billing-event intake."""
        return cls(id=None, role=PrincipalRole.ADMIN)

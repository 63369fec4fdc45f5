"""Access domain protocols."""

from typing import Protocol, runtime_checkable
from uuid import UUID

from workledger.domains.access.types import AccessAction
from workledger.schemas.principal import Principal


@runtime_checkable
class AccessPolicyProtocol(Protocol):
    """Authorization check consulted before every client-scoped operation."""

    def can(self, principal: Principal, action: AccessAction, client_id: UUID) -> bool:
        """Return whether *principal* may perform *action* on *client_id*."""
        ...

    def authorize(self, principal: Principal, action: AccessAction, client_id: UUID) -> None:
        """Raise PermissionException unless the action is allowed."""
        ...

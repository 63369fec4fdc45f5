"""Role-based access policy."""

from uuid import UUID

from workledger.core.exceptions import PermissionException
from workledger.domains.access.protocols import AccessPolicyProtocol
from workledger.domains.access.types import MEMBER_PERMISSIONS, AccessAction
from workledger.schemas.principal import Principal


class RoleAccessPolicy(AccessPolicyProtocol):
    """Staff act on every client; members act only on clients they belong to."""

    def can(self, principal: Principal, action: AccessAction, client_id: UUID) -> bool:
        """Return whether *principal* may perform *action* on *client_id*."""
        if principal.is_staff:
            return True
        if client_id not in principal.client_ids:
            return False
        return action in MEMBER_PERMISSIONS.get(principal.role, set())

    def authorize(self, principal: Principal, action: AccessAction, client_id: UUID) -> None:
        """Raise PermissionException unless the action is allowed."""
        if not self.can(principal, action, client_id):
            raise PermissionException(
                f"Principal may not perform {action.value} on client {client_id}"
            )

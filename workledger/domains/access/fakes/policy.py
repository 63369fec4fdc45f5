"""Fake access policy for testing."""

from uuid import UUID

from workledger.core.exceptions import PermissionException
from workledger.domains.access.types import AccessAction
from workledger.schemas.principal import Principal


class FakeAccessPolicy:
    """In-memory fake for AccessPolicyProtocol.

    Allows everything unless ``deny()`` was called; records every check.
    """

    def __init__(self) -> None:
        """Initialize allowing all actions."""
        self._denied: set[tuple[AccessAction, UUID]] = set()
        self._deny_all = False
        self._calls: list[tuple] = []

    def deny(self, action: AccessAction | None = None, client_id: UUID | None = None) -> None:
        """Deny one ``(action, client)`` pair, or everything when called bare."""
        if action is None or client_id is None:
            self._deny_all = True
        else:
            self._denied.add((action, client_id))

    def can(self, principal: Principal, action: AccessAction, client_id: UUID) -> bool:
        """Return whether the action is allowed."""
        self._calls.append(("can", principal, action, client_id))
        return not (self._deny_all or (action, client_id) in self._denied)

    def authorize(self, principal: Principal, action: AccessAction, client_id: UUID) -> None:
        """Raise PermissionException when denied."""
        if not self.can(principal, action, client_id):
            raise PermissionException(f"Denied {action.value} on client {client_id}")

"""HTTP API request context.

Extends BaseContext with request metadata. Only the API layer creates these
via deps.get_context().
"""

from dataclasses import dataclass

from workledger.core.context import BaseContext
from workledger.core.shared_models import AuthMethod


@dataclass
class ApiContext(BaseContext):
    """Full HTTP request context.

    Inherits the principal and logger from BaseContext and adds the request id
    stamped by the request-id middleware.
    """

    request_id: str = ""

    @property
    def auth_method(self) -> AuthMethod:
        """Principals reach the API through the authentication gateway."""
        return AuthMethod.GATEWAY

    def __str__(self) -> str:
        """Short description for log lines."""
        return (
            f"ApiContext(request_id={self.request_id}, "
            f"role={self.principal.role.value}, principal_id={self.principal.id})"
        )

"""Clients domain exceptions."""

from uuid import UUID

from workledger.core.exceptions import NotFoundException


class ClientNotFoundError(NotFoundException):
    """Raised when an operation references a client that does not exist."""

    def __init__(self, client_id: UUID) -> None:
        """Initialize with the missing client ID."""
        self.client_id = client_id
        super().__init__(f"Client {client_id} not found")

"""Shared exceptions module."""

from typing import Optional

from pydantic import ValidationError


class WorkledgerException(Exception):
    """Base exception for workledger services."""

    pass


class PermissionException(WorkledgerException):
    """Exception raised when a principal may not perform an action."""

    def __init__(
        self,
        message: Optional[str] = "Principal does not have the right to perform this action",
    ):
        """Create a new PermissionException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class NotFoundException(WorkledgerException):
    """Exception raised when an object is not found."""

    def __init__(self, message: Optional[str] = "Object not found"):
        """Create a new NotFoundException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class BadRequestError(WorkledgerException):
    """Exception raised when a request is malformed or out of range.

    Domain validation errors inherit from this so the API maps them to 400.
    """

    def __init__(self, message: Optional[str] = "Invalid request"):
        """Create a new BadRequestError instance."""
        self.message = message
        super().__init__(self.message)


class ConflictError(WorkledgerException):
    """Exception raised when an operation collides with the current state of a resource."""

    def __init__(self, message: Optional[str] = "Resource conflict"):
        """Create a new ConflictError instance."""
        self.message = message
        super().__init__(self.message)


class UnauthorizedCronError(WorkledgerException):
    """Raised when a scheduled-job trigger does not present the cron secret."""

    def __init__(self, message: str = "Unauthorized"):
        """Initialize with default message."""
        self.message = message
        super().__init__(self.message)


def unpack_validation_error(exc: ValidationError) -> dict:
    """Unpack a Pydantic validation error into a dictionary.

    Args:
    ----
        exc (ValidationError): The Pydantic validation error.

    Returns:
    -------
        dict: The dictionary representation of the validation error.

    """
    error_messages = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        message = error["msg"]
        error_messages.append({field: message})

    return {"errors": error_messages}

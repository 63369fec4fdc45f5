"""Base context for all operations.

Provides the universal context type that all specialized contexts inherit from.
Services type-hint against BaseContext. ApiContext (api/context.py) extends it
with request metadata; SystemContext covers scheduled jobs and billing events.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
from uuid import UUID

from workledger.core.logging import ContextualLogger
from workledger.core.shared_models import AuthMethod
from workledger.schemas.principal import Principal


@dataclass
class BaseContext:
    """Base context for all operations.

    Carries the acting principal for access checks and a contextual logger
    with identity dimensions. ``logger`` is keyword-only with a default of
    None; when omitted it is derived from the principal in __post_init__.
    """

    principal: Principal

    logger: ContextualLogger = field(default=None, kw_only=True, repr=False)

    def __post_init__(self):
        """Auto-derive logger from principal identity if not provided."""
        if self.logger is None:
            from workledger.core.logging import logger as base_logger

            dims: Dict[str, str] = {"principal_role": self.principal.role.value}
            if self.principal.id:
                dims["principal_id"] = str(self.principal.id)
            self.logger = base_logger.with_context(**dims)

    @property
    def actor_id(self) -> Optional[UUID]:
        """User ID recorded as ``logged_by`` on ledger entries."""
        return self.principal.id

    @property
    def auth_method(self) -> AuthMethod:
        """How the principal was established."""
        return AuthMethod.SYSTEM


@dataclass
class SystemContext(BaseContext):
    """Context for actors that are not interactive users."""

    source: AuthMethod = AuthMethod.SYSTEM

    @classmethod
    def for_job(cls, job_name: str, source: AuthMethod = AuthMethod.CRON) -> "SystemContext":
        """Build a context for a named scheduled job or event consumer."""
        from workledger.core.logging import logger as base_logger

        return cls(
            principal=Principal.system(),
            source=source,
            logger=base_logger.with_context(job=job_name, auth_method=source.value),
        )

    @property
    def auth_method(self) -> AuthMethod:
        """How the principal was established."""
        return self.source

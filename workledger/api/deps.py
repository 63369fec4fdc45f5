"""Dependencies that are used in the API endpoints."""

import secrets
import uuid
from typing import List, Optional, get_type_hints
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request

from workledger.api.context import ApiContext
from workledger.core import container as container_mod
from workledger.core.config import settings
from workledger.core.container import Container
from workledger.core.context import SystemContext
from workledger.core.exceptions import UnauthorizedCronError
from workledger.core.logging import logger
from workledger.core.shared_models import AuthMethod, PrincipalRole
from workledger.db.session import get_db
from workledger.schemas.principal import Principal

__all__ = [
    "Inject",
    "get_container",
    "get_context",
    "get_db",
    "get_principal",
    "get_system_context",
    "verify_cron_secret",
]


def _parse_client_ids(raw: Optional[str]) -> List[UUID]:
    """Parse the comma-separated membership header, ignoring blanks."""
    if not raw:
        return []
    try:
        return [UUID(part.strip()) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid X-Principal-Clients header")


async def get_principal(
    x_principal_id: Optional[str] = Header(None, alias="X-Principal-Id"),
    x_principal_role: Optional[str] = Header(None, alias="X-Principal-Role"),
    x_principal_clients: Optional[str] = Header(None, alias="X-Principal-Clients"),
) -> Principal:
    """Build the acting principal from headers set by the authentication gateway.

    Raises:
    ------
        HTTPException: 401 if the role is missing or unknown, or an id is malformed.
    """
    if not x_principal_role:
        raise HTTPException(status_code=401, detail="No valid authentication provided")
    try:
        role = PrincipalRole(x_principal_role.strip().lower())
    except ValueError:
        raise HTTPException(status_code=401, detail=f"Unknown role: {x_principal_role}")

    principal_id = None
    if x_principal_id:
        try:
            principal_id = UUID(x_principal_id.strip())
        except ValueError:
            raise HTTPException(status_code=401, detail="Invalid X-Principal-Id header")

    return Principal(
        id=principal_id, role=role, client_ids=_parse_client_ids(x_principal_clients)
    )


async def get_context(
    request: Request,
    principal: Principal = Depends(get_principal),
) -> ApiContext:
    """Create the API context for the request.

    This is the primary dependency for client-scoped endpoints, providing:
    - Request tracking (request_id)
    - The acting principal
    - A contextual logger carrying both
    """
    request_id = getattr(request.state, "request_id", str(uuid.uuid4()))

    base_logger = logger.with_context(
        request_id=request_id,
        principal_role=principal.role.value,
        auth_method=AuthMethod.GATEWAY.value,
        context_base="api",
    )
    if principal.id:
        base_logger = base_logger.with_context(principal_id=str(principal.id))

    ctx = ApiContext(principal=principal, request_id=request_id, logger=base_logger)

    # Store context in request state for middleware access
    request.state.api_context = ctx
    return ctx


async def verify_cron_secret(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> None:
    """Reject scheduled-job triggers that do not present ``Bearer <CRON_SECRET>``.

    When no secret is configured the check is disabled.
    """
    if not settings.CRON_SECRET:
        return
    expected = f"Bearer {settings.CRON_SECRET}"
    if not authorization or not secrets.compare_digest(authorization, expected):
        raise UnauthorizedCronError()


def get_system_context(job_name: str, source: AuthMethod = AuthMethod.CRON):
    """Return a dependency that builds a SystemContext for *job_name*."""

    def _build(request: Request) -> SystemContext:
        ctx = SystemContext.for_job(job_name, source=source)
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            ctx.logger = ctx.logger.with_context(request_id=request_id)
        return ctx

    return Depends(_build)


def get_container() -> Container:
    """Get the DI container. Initialized at startup."""
    c = container_mod.container
    if c is None:
        raise RuntimeError("Container not initialized. Call initialize_container() first.")
    return c


# ---------------------------------------------------------------------------
# Protocol Injection
# ---------------------------------------------------------------------------

# Cache of protocol_type → Container field name, built once at first call.
_INJECT_CACHE: dict[type, str] = {}


def _resolve_field_name(protocol_type: type) -> str:
    """Find which Container field matches the given protocol type.

    Uses get_type_hints() to introspect the Container dataclass.
    Result is cached so the lookup happens at most once per protocol type.
    """
    if not _INJECT_CACHE:
        for name, hint in get_type_hints(Container).items():
            _INJECT_CACHE[hint] = name

    field_name = _INJECT_CACHE.get(protocol_type)
    if field_name is None:
        available = list(_INJECT_CACHE.values())
        raise TypeError(
            f"No binding for {protocol_type.__name__} in Container. Available fields: {available}"
        )
    return field_name


def Inject(protocol_type: type):  # noqa: N802 - uppercase to match FastAPI convention
    """Resolve a protocol implementation from the DI container.

    Works like ``Depends()`` but looks up the implementation by protocol type
    instead of requiring the caller to know about the Container internals::

        @router.post("")
        async def submit(tasks: TaskServiceProtocol = Inject(TaskServiceProtocol)):
            ...
    """
    field_name = _resolve_field_name(protocol_type)

    def _resolve(c: Container = Depends(get_container)):
        return getattr(c, field_name)

    return Depends(_resolve)

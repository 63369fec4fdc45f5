"""API test fixtures.

Provides an async HTTP client wired to the FastAPI app with the DI container
overridden to run the real services over in-memory repositories. Available to
all colocated API tests under api/.

Pattern:
    1. Override get_container -> returns test_container (fake persistence)
    2. Override get_db        -> returns an AsyncMock session
    3. Override get_context   -> returns an admin ApiContext (``client`` only)
    4. Test hits the endpoint, asserts on HTTP response + fake state
"""

from typing import Optional
from unittest.mock import AsyncMock
from uuid import UUID

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from workledger.api.context import ApiContext
from workledger.api.deps import get_container, get_context, get_db
from workledger.core.logging import logger
from workledger.core.shared_models import PrincipalRole
from workledger.schemas.principal import Principal

TEST_REQUEST_ID = "test-request-00000000"
TEST_ACTOR_ID = UUID("00000000-0000-0000-0000-0000000000aa")
BASE_URL = "http://test/api/v1"


def _make_fake_context(
    role: PrincipalRole = PrincipalRole.ADMIN, client_ids: Optional[list[UUID]] = None
) -> ApiContext:
    """Build a minimal ApiContext for API tests."""
    return ApiContext(
        principal=Principal(id=TEST_ACTOR_ID, role=role, client_ids=client_ids or []),
        request_id=TEST_REQUEST_ID,
        logger=logger.with_context(request_id=TEST_REQUEST_ID),
    )


@pytest_asyncio.fixture
async def client(test_container):
    """Async HTTP client acting as an admin, with faked DI container and session."""
    from workledger.main import app

    fake_ctx = _make_fake_context()

    app.dependency_overrides[get_container] = lambda: test_container
    app.dependency_overrides[get_db] = lambda: AsyncMock()
    app.dependency_overrides[get_context] = lambda: fake_ctx

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def gateway_client(test_container):
    """Async HTTP client whose principal is read from the gateway headers."""
    from workledger.main import app

    app.dependency_overrides[get_container] = lambda: test_container
    app.dependency_overrides[get_db] = lambda: AsyncMock()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as ac:
        yield ac

    app.dependency_overrides.clear()

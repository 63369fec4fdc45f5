"""Shared fixtures for the persistence integration tests.

These fixtures provide:
- A skip marker for machines without a reachable Postgres
- A NullPool engine over a freshly created schema, dropped afterwards
- A session factory for tests that need several concurrent sessions
- A ``seed`` helper that writes rows through the crud layer
"""

import asyncio
from datetime import date, datetime, timezone
from typing import AsyncGenerator, Optional
from uuid import UUID

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from workledger import crud
from workledger.core.config import settings
from workledger.core.shared_models import TaskStatus
from workledger.models import Client, Task, UsageLog
from workledger.models._base import Base


def new_engine() -> AsyncEngine:
    """Engine without pooling, so no connection outlives the test's event loop."""
    return create_async_engine(settings.SQLALCHEMY_ASYNC_DATABASE_URI, poolclass=NullPool)


async def drop_schema(engine: AsyncEngine) -> None:
    """Drop every workledger table, including alembic's version table."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.execute(text("DROP TABLE IF EXISTS alembic_version"))


def postgres_available() -> bool:
    """Check if the configured Postgres server accepts connections."""

    async def _ping() -> None:
        engine = new_engine()
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        finally:
            await engine.dispose()

    try:
        asyncio.run(asyncio.wait_for(_ping(), timeout=5))
        return True
    except Exception:
        return False


requires_postgres = pytest.mark.skipif(
    not postgres_available(),
    reason="Postgres not reachable with the configured POSTGRES_* settings",
)


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Engine over a schema created from the models for this test only."""
    engine = new_engine()
    await drop_schema(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await drop_schema(engine)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, autoflush=False, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


class Seeder:
    """Writes fixture rows through the crud singletons, one commit each."""

    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory

    async def client(
        self,
        name: str = "Acme",
        *,
        plan_code: Optional[str] = "starter",
        hours_monthly: int = 40,
        cycle_start: date = date(2024, 3, 1),
    ) -> Client:
        async with self._session_factory() as db:
            return await crud.client.create(
                db,
                obj_in={
                    "name": name,
                    "plan_code": plan_code,
                    "hours_monthly": hours_monthly,
                    "cycle_start": cycle_start,
                },
            )

    async def task(
        self,
        client_id: UUID,
        title: str,
        *,
        status: TaskStatus = TaskStatus.QUEUED,
        position: int = 0,
        est_hours: Optional[int] = None,
    ) -> Task:
        async with self._session_factory() as db:
            return await crud.task.create(
                db,
                obj_in={
                    "client_id": client_id,
                    "title": title,
                    "status": status.value,
                    "position": position,
                    "est_hours": est_hours,
                    "completed_at": (
                        datetime.now(timezone.utc) if status == TaskStatus.DONE else None
                    ),
                },
            )

    async def usage(self, client_id: UUID, hours: float, logged_at: datetime) -> UsageLog:
        async with self._session_factory() as db:
            return await crud.usage_log.create(
                db,
                obj_in={"client_id": client_id, "hours": hours, "logged_at": logged_at},
            )


@pytest.fixture
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)

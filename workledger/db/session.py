"""Database session configuration."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from workledger.core.config import settings

# Request handlers hold one connection each; the completion append briefly
# holds a second one after the transition commits.
POOL_SIZE = settings.db_pool_size
MAX_OVERFLOW = settings.db_pool_max_overflow

connect_args_config = {
    "server_settings": {
        "application_name": settings.PROJECT_NAME,
        # A client row locked FOR UPDATE must not outlive a stuck request
        "idle_in_transaction_session_timeout": "60000",
    },
    "command_timeout": 30,
}

if settings.POSTGRES_SSLMODE == "disable":
    connect_args_config["ssl"] = False

async_engine = create_async_engine(
    settings.SQLALCHEMY_ASYNC_DATABASE_URI,
    pool_size=POOL_SIZE,
    max_overflow=MAX_OVERFLOW,
    pool_pre_ping=True,
    pool_recycle=300,
    pool_timeout=30,
    isolation_level="READ COMMITTED",
    connect_args=connect_args_config,
)

AsyncSessionLocal = async_sessionmaker(
    bind=async_engine, autoflush=False, expire_on_commit=False
)


async def _session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as db:
        yield db


get_db_context = asynccontextmanager(_session)
"""Session owned by code running outside a request.

Used by the usage append that follows a task completion, which commits in
its own transaction::

    async with get_db_context() as db:
        await db.execute(...)
"""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped session for FastAPI dependency injection."""
    async for db in _session():
        yield db

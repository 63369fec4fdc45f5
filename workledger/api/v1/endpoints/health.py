"""Health check endpoints."""

from fastapi import Depends, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from workledger.api import deps
from workledger.api.router import TrailingSlashRouter
from workledger.core.logging import logger

router = TrailingSlashRouter()


@router.get("")
async def health_check() -> dict[str, str]:
    """Check if the API is healthy.

    Returns:
    --------
        dict: A dictionary containing the status of the API.
    """
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    response: Response, db: AsyncSession = Depends(deps.get_db)
) -> dict[str, str]:
    """Readiness probe: the process is up and Postgres answers."""
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning(f"Readiness check failed: {exc}")
        response.status_code = 503
        return {"status": "unavailable"}
    return {"status": "ready"}

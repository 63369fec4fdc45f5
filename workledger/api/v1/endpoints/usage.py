"""API endpoints for the usage ledger."""

from typing import List
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.api import deps
from workledger.api.context import ApiContext
from workledger.api.deps import Inject
from workledger.api.router import TrailingSlashRouter
from workledger.domains.usage.protocols import UsageServiceProtocol

router = TrailingSlashRouter()


@router.post(
    "/log",
    response_model=schemas.UsageLog,
    status_code=201,
    responses={
        400: {"model": schemas.BadRequestErrorResponse},
        404: {"model": schemas.NotFoundErrorResponse},
    },
)
async def log_usage(
    *,
    db: AsyncSession = Depends(deps.get_db),
    entry_in: schemas.UsageLogCreate,
    ctx: ApiContext = Depends(deps.get_context),
    usage: UsageServiceProtocol = Inject(UsageServiceProtocol),
) -> schemas.UsageLog:
    """Append hours to the client's usage ledger."""
    entry = await usage.log_hours(db, entry_in, ctx)
    return schemas.UsageLog.model_validate(entry)


@router.get(
    "/clients/{client_id}",
    response_model=schemas.ClientUsage,
    responses={404: {"model": schemas.NotFoundErrorResponse}},
)
async def get_client_usage(
    *,
    db: AsyncSession = Depends(deps.get_db),
    client_id: UUID,
    ctx: ApiContext = Depends(deps.get_context),
    usage: UsageServiceProtocol = Inject(UsageServiceProtocol),
) -> schemas.ClientUsage:
    """Hours used in the current cycle, percent of plan capacity and risk flag."""
    return await usage.get_client_usage(db, client_id, ctx)


@router.get("/overview", response_model=List[schemas.ClientUsage])
async def get_usage_overview(
    *,
    db: AsyncSession = Depends(deps.get_db),
    ctx: ApiContext = Depends(deps.get_context),
    usage: UsageServiceProtocol = Inject(UsageServiceProtocol),
) -> List[schemas.ClientUsage]:
    """Usage of every client visible to the caller, highest consumption first."""
    return await usage.get_overview(db, ctx)

"""API routes for the FastAPI application."""

from workledger.api.router import TrailingSlashRouter
from workledger.api.v1.endpoints import billing, cron, health, tasks, usage

# Use our custom router that handles trailing slashes
api_router = TrailingSlashRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(usage.router, prefix="/usage", tags=["usage"])
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])
api_router.include_router(cron.router, prefix="/cron", tags=["cron"])

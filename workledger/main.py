"""Main module of the FastAPI application.

This module sets up the FastAPI application, the middleware that logs incoming
requests and unhandled exceptions, and the exception handlers.
"""

import os
import subprocess
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from workledger.api.middleware import (
    add_request_id,
    exception_logging_middleware,
    log_requests,
    not_found_exception_handler,
    permission_exception_handler,
    validation_exception_handler,
    workledger_exception_handler,
)
from workledger.api.router import TrailingSlashRouter
from workledger.api.v1.api import api_router
from workledger.core.config import Environment, settings
from workledger.core.exceptions import (
    NotFoundException,
    PermissionException,
    WorkledgerException,
)
from workledger.core.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events.

    Initializes the DI container and optionally runs alembic migrations.
    """
    from workledger.core.container import initialize_container

    logger.info("Initializing dependency injection container...")
    initialize_container(settings)
    logger.info("Container initialized successfully")

    if settings.RUN_ALEMBIC_MIGRATIONS:
        logger.info("Running alembic migrations...")
        env = os.environ.copy()
        root_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        env["PYTHONPATH"] = root_dir
        subprocess.run(
            [sys.executable, "-m", "alembic", "upgrade", "heads"],
            check=True,
            cwd=root_dir,
            env=env,
        )

    yield


# Create FastAPI app with our custom router and disable FastAPI's built-in redirects
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url="/openapi.json",
    lifespan=lifespan,
    router=TrailingSlashRouter(),
    redirect_slashes=False,
)

app.include_router(api_router, prefix="/api/v1")

# Register middleware; the last one registered is outermost
app.middleware("http")(add_request_id)
app.middleware("http")(log_requests)
app.middleware("http")(exception_logging_middleware)

# Register exception handlers
app.exception_handler(RequestValidationError)(validation_exception_handler)
app.exception_handler(ValidationError)(validation_exception_handler)
app.exception_handler(PermissionException)(permission_exception_handler)
app.exception_handler(NotFoundException)(not_found_exception_handler)
app.exception_handler(WorkledgerException)(workledger_exception_handler)

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]

if settings.ADDITIONAL_CORS_ORIGINS:
    if settings.ENVIRONMENT == Environment.LOCAL:
        CORS_ORIGINS.append("*")
    else:
        CORS_ORIGINS.extend(
            origin.strip() for origin in settings.ADDITIONAL_CORS_ORIGINS.split(",")
        )

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

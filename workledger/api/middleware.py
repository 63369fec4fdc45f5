"""Middleware for the FastAPI application.

This module contains middleware that process requests and responses, and the
exception handlers that map domain exceptions to HTTP status codes.
"""

import time
import traceback
import uuid

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from workledger.core.config import settings
from workledger.core.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundException,
    PermissionException,
    UnauthorizedCronError,
    WorkledgerException,
    unpack_validation_error,
)
from workledger.core.logging import logger


async def add_request_id(request: Request, call_next) -> Response:
    """Middleware to generate and add a request ID to the request for tracing.

    Args:
    ----
        request (Request): The incoming request.
        call_next (callable): The next middleware in the chain.

    Returns:
    -------
        Response: The response to the incoming request.

    """
    request.state.request_id = str(uuid.uuid4())
    response = await call_next(request)
    response.headers["X-Request-ID"] = request.state.request_id
    return response


async def log_requests(request: Request, call_next) -> Response:
    """Middleware to log incoming requests.

    Args:
    ----
        request (Request): The incoming request.
        call_next (callable): The next middleware in the chain.

    Returns:
    -------
        Response: The response to the incoming request.

    """
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time
    logger.with_context(request_id=getattr(request.state, "request_id", None)).info(
        f"Handled request {request.method} {request.url.path} in {duration:.2f} seconds. "
        f"Response code: {response.status_code}"
    )
    return response


async def exception_logging_middleware(request: Request, call_next) -> Response:
    """Middleware to log unhandled exceptions.

    Args:
    ----
        request (Request): The incoming request.
        call_next (callable): The next middleware in the chain.

    Returns:
    -------
        Response: The response to the incoming request.

    """
    try:
        response = await call_next(request)
        return response
    except Exception as exc:
        logger.error(f"Unhandled exception: {exc}\n{traceback.format_exc()}")

        response_content = {
            "detail": f"Internal Server Error: {exc.__class__.__name__}: {str(exc)}"
        }

        # Include stack trace only in development mode
        if settings.LOCAL_DEVELOPMENT:
            response_content["trace"] = traceback.format_exc()

        return JSONResponse(status_code=500, content=response_content)


# Exception handlers
async def validation_exception_handler(
    request: Request, exc: RequestValidationError | ValidationError
) -> JSONResponse:
    """Exception handler for request and schema validation errors.

    Returns:
    -------
        JSONResponse: 422 with one ``{location: message}`` entry per error, e.g.

        {
            "errors": [
                {"body.title": "String should have at least 3 characters"},
                {"body.hours": "Input should be greater than 0"}
            ]
        }

    """
    error_messages = unpack_validation_error(exc)
    logger.warning(f"Validation error on {request.method} {request.url.path}: {error_messages}")
    return JSONResponse(status_code=422, content=error_messages)


async def permission_exception_handler(request: Request, exc: PermissionException) -> JSONResponse:
    """Exception handler for PermissionException.

    Returns:
    -------
        JSONResponse: A 403 Forbidden status response that details the error message.

    """
    return JSONResponse(status_code=403, content={"detail": str(exc)})


async def not_found_exception_handler(request: Request, exc: NotFoundException) -> JSONResponse:
    """Exception handler for NotFoundException.

    Returns:
    -------
        JSONResponse: A 404 Not Found status response that details the error message.

    """
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def _conflict_body(exc: ConflictError) -> dict:
    content: dict = {"detail": str(exc)}
    blocking_id = getattr(exc, "blocking_task_id", None)
    if blocking_id is not None:
        content["blocking_task_id"] = str(blocking_id)
        content["blocking_task_title"] = getattr(exc, "blocking_task_title", None)
    return content


async def workledger_exception_handler(
    request: Request, exc: WorkledgerException
) -> JSONResponse:
    """Generic exception handler for all WorkledgerException types.

    Maps base classes to status codes so a new domain exception inheriting from
    BadRequestError or ConflictError is covered without its own registration.
    NotFoundException and PermissionException have dedicated handlers
    registered before this one.
    """
    if isinstance(exc, ConflictError):
        return JSONResponse(status_code=409, content=_conflict_body(exc))

    status_map = {
        BadRequestError: 400,
        UnauthorizedCronError: 401,
    }

    for exc_type, code in status_map.items():
        if isinstance(exc, exc_type):
            return JSONResponse(status_code=code, content={"detail": str(exc)})

    # Default for unmapped WorkledgerException subclasses
    logger.error(f"Unmapped {exc.__class__.__name__}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})

"""API endpoints for tasks.

Routes are thin: every rule (single active task, positions, completion
accounting) lives in the tasks domain behind TaskServiceProtocol.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.api import deps
from workledger.api.context import ApiContext
from workledger.api.deps import Inject
from workledger.api.router import TrailingSlashRouter
from workledger.core.shared_models import TaskStatus
from workledger.domains.tasks.protocols import TaskServiceProtocol

router = TrailingSlashRouter()


# Declared before /{task_id} so "reorder" is never parsed as a task id.
@router.patch(
    "/reorder",
    response_model=schemas.TaskReorderResponse,
    responses={400: {"model": schemas.BadRequestErrorResponse}},
)
async def reorder_tasks(
    *,
    db: AsyncSession = Depends(deps.get_db),
    request: schemas.TaskReorderRequest,
    ctx: ApiContext = Depends(deps.get_context),
    tasks: TaskServiceProtocol = Inject(TaskServiceProtocol),
) -> schemas.TaskReorderResponse:
    """Reorder tasks within one ``(client, status)`` column.

    The batch is applied atomically: if any member is invalid nothing moves.
    """
    updated = await tasks.reorder(db, request, ctx)
    return schemas.TaskReorderResponse(ok=True, updated=updated)


@router.patch(
    "/{task_id}",
    response_model=schemas.Task,
    responses={
        400: {"model": schemas.BadRequestErrorResponse},
        404: {"model": schemas.NotFoundErrorResponse},
        409: {"model": schemas.ConflictErrorResponse},
    },
)
async def update_task(
    *,
    db: AsyncSession = Depends(deps.get_db),
    task_id: UUID,
    task_in: schemas.TaskUpdate,
    ctx: ApiContext = Depends(deps.get_context),
    tasks: TaskServiceProtocol = Inject(TaskServiceProtocol),
) -> schemas.Task:
    """Partially update a task, including moving it to another status.

    Starting a task while another task of the same client is in progress
    returns 409 naming the blocking task.
    """
    task = await tasks.update(db, task_id, task_in, ctx)
    return schemas.Task.model_validate(task)


@router.post("", response_model=schemas.Task, status_code=201)
async def submit_task(
    *,
    db: AsyncSession = Depends(deps.get_db),
    task_in: schemas.TaskSubmit,
    ctx: ApiContext = Depends(deps.get_context),
    tasks: TaskServiceProtocol = Inject(TaskServiceProtocol),
) -> schemas.Task:
    """Submit a new task to the end of the client's queue."""
    task = await tasks.submit(db, task_in, ctx)
    return schemas.Task.model_validate(task)


@router.post(
    "/admin",
    response_model=schemas.Task,
    status_code=201,
    responses={409: {"model": schemas.ConflictErrorResponse}},
)
async def create_task(
    *,
    db: AsyncSession = Depends(deps.get_db),
    task_in: schemas.TaskCreate,
    ctx: ApiContext = Depends(deps.get_context),
    tasks: TaskServiceProtocol = Inject(TaskServiceProtocol),
) -> schemas.Task:
    """Create a task in any status (staff only)."""
    task = await tasks.create(db, task_in, ctx)
    return schemas.Task.model_validate(task)


@router.get("", response_model=List[schemas.Task])
async def list_tasks(
    *,
    db: AsyncSession = Depends(deps.get_db),
    client_id: UUID = Query(..., description="Client whose tasks to list"),
    status: Optional[TaskStatus] = Query(None, description="Only tasks in this status"),
    ctx: ApiContext = Depends(deps.get_context),
    tasks: TaskServiceProtocol = Inject(TaskServiceProtocol),
) -> List[schemas.Task]:
    """List a client's tasks, highest priority first, then by position."""
    result = await tasks.list_for_client(db, client_id, ctx, status=status)
    return [schemas.Task.model_validate(task) for task in result]


@router.delete(
    "/{task_id}", status_code=204, responses={404: {"model": schemas.NotFoundErrorResponse}}
)
async def delete_task(
    *,
    db: AsyncSession = Depends(deps.get_db),
    task_id: UUID,
    ctx: ApiContext = Depends(deps.get_context),
    tasks: TaskServiceProtocol = Inject(TaskServiceProtocol),
) -> Response:
    """Delete a task."""
    await tasks.delete(db, task_id, ctx)
    return Response(status_code=204)

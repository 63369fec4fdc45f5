"""Task service: access checks in front of the state machine and sequencer."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workledger import schemas
from workledger.core.context import BaseContext
from workledger.core.shared_models import TaskStatus
from workledger.domains.access.protocols import AccessPolicyProtocol
from workledger.domains.access.types import AccessAction
from workledger.domains.clients.exceptions import ClientNotFoundError
from workledger.domains.clients.repository import ClientRepositoryProtocol
from workledger.domains.tasks.exceptions import TaskNotFoundError
from workledger.domains.tasks.protocols import (
    TaskSequencerProtocol,
    TaskServiceProtocol,
    TaskStateMachineProtocol,
)
from workledger.domains.tasks.repository import TaskRepositoryProtocol
from workledger.domains.tasks.types import sort_for_display
from workledger.models import Task


class TaskService(TaskServiceProtocol):
    """Task operations exposed to the API."""

    def __init__(
        self,
        task_repo: TaskRepositoryProtocol,
        client_repo: ClientRepositoryProtocol,
        state_machine: TaskStateMachineProtocol,
        sequencer: TaskSequencerProtocol,
        access: AccessPolicyProtocol,
    ) -> None:
        """Initialize with collaborators."""
        self._task_repo = task_repo
        self._client_repo = client_repo
        self._state_machine = state_machine
        self._sequencer = sequencer
        self._access = access

    async def submit(self, db: AsyncSession, obj_in: schemas.TaskSubmit, ctx: BaseContext) -> Task:
        """Create a queued task at the end of the client's queue."""
        self._access.authorize(ctx.principal, AccessAction.TASK_SUBMIT, obj_in.client_id)
        create = schemas.TaskCreate(
            client_id=obj_in.client_id,
            title=obj_in.title,
            description=obj_in.description,
            priority=obj_in.priority,
            status=TaskStatus.QUEUED,
        )
        return await self._state_machine.create(db, create, ctx)

    async def create(self, db: AsyncSession, obj_in: schemas.TaskCreate, ctx: BaseContext) -> Task:
        """Administrative creation in any status."""
        self._access.authorize(ctx.principal, AccessAction.TASK_CREATE, obj_in.client_id)
        return await self._state_machine.create(db, obj_in, ctx)

    async def update(
        self, db: AsyncSession, task_id: UUID, update: schemas.TaskUpdate, ctx: BaseContext
    ) -> Task:
        """Partial update with an optional status transition."""
        task = await self._get_or_raise(db, task_id)
        self._access.authorize(ctx.principal, AccessAction.TASK_UPDATE, task.client_id)
        return await self._state_machine.transition(db, task_id, update, ctx)

    async def reorder(
        self, db: AsyncSession, request: schemas.TaskReorderRequest, ctx: BaseContext
    ) -> int:
        """Reorder one ``(client, status)`` partition atomically."""
        self._access.authorize(ctx.principal, AccessAction.TASK_REORDER, request.client_id)
        return await self._sequencer.reorder(db, request.client_id, request.status, request.order)

    async def list_for_client(
        self,
        db: AsyncSession,
        client_id: UUID,
        ctx: BaseContext,
        status: Optional[TaskStatus] = None,
    ) -> List[Task]:
        """Tasks of a client, highest priority first, then by position."""
        self._access.authorize(ctx.principal, AccessAction.TASK_READ, client_id)
        if await self._client_repo.get(db, client_id) is None:
            raise ClientNotFoundError(client_id)
        tasks = await self._task_repo.get_by_client(
            db, client_id=client_id, status=status.value if status else None
        )
        return sort_for_display(tasks)

    async def delete(self, db: AsyncSession, task_id: UUID, ctx: BaseContext) -> None:
        """Hard-delete a task from any status."""
        task = await self._get_or_raise(db, task_id)
        self._access.authorize(ctx.principal, AccessAction.TASK_DELETE, task.client_id)
        if not await self._task_repo.remove(db, task_id=task_id):
            raise TaskNotFoundError(task_id)
        ctx.logger.with_context(task_id=str(task_id), client_id=str(task.client_id)).info(
            "Task deleted"
        )

    async def _get_or_raise(self, db: AsyncSession, task_id: UUID) -> Task:
        task = await self._task_repo.get(db, task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

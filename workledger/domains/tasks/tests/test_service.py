"""Unit tests for TaskService."""

import pytest

from workledger.core.exceptions import PermissionException
from workledger.core.shared_models import PrincipalRole, TaskPriority, TaskStatus
from workledger.domains.access.types import AccessAction
from workledger.domains.clients.exceptions import ClientNotFoundError
from workledger.domains.tasks.exceptions import TaskNotFoundError
from workledger.domains.tasks.fakes.sequencer import FakeTaskSequencer
from workledger.domains.tasks.service import TaskService
from workledger.domains.tasks.tests.conftest import (
    DEFAULT_CLIENT_ID,
    OTHER_CLIENT_ID,
    TaskHarness,
    _make_ctx,
    _make_task,
)
from workledger.schemas.task import (
    TaskCreate,
    TaskReorderItem,
    TaskReorderRequest,
    TaskSubmit,
    TaskUpdate,
)


@pytest.mark.asyncio
async def test_submit_creates_queued_task_at_end_of_queue(harness: TaskHarness):
    harness.tasks.seed(_make_task("Existing", position=2))

    task = await harness.service.submit(
        harness.db,
        TaskSubmit(client_id=DEFAULT_CLIENT_ID, title="  New feature  "),
        _make_ctx(PrincipalRole.CLIENT),
    )

    assert task.status == "queued"
    assert task.priority == "medium"
    assert task.title == "New feature"
    assert task.position == 3


@pytest.mark.asyncio
async def test_submit_for_unknown_client_not_found(harness: TaskHarness):
    with pytest.raises(ClientNotFoundError):
        await harness.service.submit(
            harness.db, TaskSubmit(client_id=OTHER_CLIENT_ID, title="Nope"), _make_ctx()
        )


@pytest.mark.asyncio
async def test_submit_denied_by_access_policy(harness: TaskHarness):
    harness.access.deny(AccessAction.TASK_SUBMIT, DEFAULT_CLIENT_ID)

    with pytest.raises(PermissionException):
        await harness.service.submit(
            harness.db, TaskSubmit(client_id=DEFAULT_CLIENT_ID, title="Blocked"), _make_ctx()
        )
    assert harness.tasks.all() == []


@pytest.mark.asyncio
async def test_admin_create_checks_create_permission(harness: TaskHarness):
    await harness.service.create(
        harness.db,
        TaskCreate(client_id=DEFAULT_CLIENT_ID, title="Admin task", est_hours=3),
        _make_ctx(),
    )

    checked = [c[2] for c in harness.access._calls]
    assert checked == [AccessAction.TASK_CREATE]


@pytest.mark.asyncio
async def test_update_authorizes_against_task_client(harness: TaskHarness):
    task = _make_task()
    harness.tasks.seed(task)
    harness.access.deny(AccessAction.TASK_UPDATE, DEFAULT_CLIENT_ID)

    with pytest.raises(PermissionException):
        await harness.service.update(harness.db, task.id, TaskUpdate(title="Renamed"), _make_ctx())
    assert task.title == "Fix login"


@pytest.mark.asyncio
async def test_update_missing_task_not_found(harness: TaskHarness):
    with pytest.raises(TaskNotFoundError):
        await harness.service.update(
            harness.db, _make_task().id, TaskUpdate(title="Renamed"), _make_ctx()
        )


@pytest.mark.asyncio
async def test_list_for_client_returns_display_order(harness: TaskHarness):
    low = _make_task("low", priority=TaskPriority.LOW, position=0)
    high_late = _make_task("high late", priority=TaskPriority.HIGH, position=5)
    high_early = _make_task("high early", priority=TaskPriority.HIGH, position=1)
    harness.tasks.seed(low, high_late, high_early)

    tasks = await harness.service.list_for_client(harness.db, DEFAULT_CLIENT_ID, _make_ctx())

    assert [t.title for t in tasks] == ["high early", "high late", "low"]


@pytest.mark.asyncio
async def test_list_for_client_filters_status(harness: TaskHarness):
    harness.tasks.seed(_make_task("q"), _make_task("d", status=TaskStatus.DONE))

    tasks = await harness.service.list_for_client(
        harness.db, DEFAULT_CLIENT_ID, _make_ctx(), status=TaskStatus.DONE
    )

    assert [t.title for t in tasks] == ["d"]


@pytest.mark.asyncio
async def test_reorder_delegates_to_sequencer(harness: TaskHarness):
    a = _make_task("a", position=0)
    b = _make_task("b", position=1)
    harness.tasks.seed(a, b)

    moved = await harness.service.reorder(
        harness.db,
        TaskReorderRequest(
            client_id=DEFAULT_CLIENT_ID,
            status=TaskStatus.QUEUED,
            order=[TaskReorderItem(id=a.id, position=1), TaskReorderItem(id=b.id, position=0)],
        ),
        _make_ctx(),
    )

    assert moved == 2
    assert (a.position, b.position) == (1, 0)


@pytest.mark.asyncio
async def test_reorder_denied_never_reaches_sequencer(harness: TaskHarness):
    sequencer = FakeTaskSequencer()
    service = TaskService(
        task_repo=harness.tasks,
        client_repo=harness.clients,
        state_machine=harness.state_machine,
        sequencer=sequencer,
        access=harness.access,
    )
    harness.access.deny(AccessAction.TASK_REORDER, DEFAULT_CLIENT_ID)
    request = TaskReorderRequest(client_id=DEFAULT_CLIENT_ID, status=TaskStatus.QUEUED, order=[])

    with pytest.raises(PermissionException):
        await service.reorder(harness.db, request, _make_ctx())

    assert sequencer._calls == []


@pytest.mark.asyncio
async def test_delete_from_any_status(harness: TaskHarness):
    task = _make_task(status=TaskStatus.IN_PROGRESS)
    harness.tasks.seed(task)

    await harness.service.delete(harness.db, task.id, _make_ctx())

    assert harness.tasks.all() == []


@pytest.mark.asyncio
async def test_delete_missing_task_not_found(harness: TaskHarness):
    with pytest.raises(TaskNotFoundError):
        await harness.service.delete(harness.db, _make_task().id, _make_ctx())

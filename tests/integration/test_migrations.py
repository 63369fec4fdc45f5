"""Alembic migrations against Postgres: the migrated schema carries every model constraint."""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import text

from alembic import command
from alembic.config import Config
from workledger.models.task import COMPLETED_AT_MATCHES_STATUS, ONE_ACTIVE_TASK_INDEX

from .conftest import drop_schema, new_engine, requires_postgres

pytestmark = [pytest.mark.integration, requires_postgres]

ALEMBIC_DIR = Path(__file__).resolve().parents[2] / "alembic"
INITIAL_REVISION = "a0c1e2f3b4d5"


def _run(statement: str, **params):
    """Execute one statement in its own transaction and return all rows."""

    async def _execute():
        engine = new_engine()
        try:
            async with engine.begin() as conn:
                result = await conn.execute(text(statement), params)
                return result.all() if result.returns_rows else []
        finally:
            await engine.dispose()

    return asyncio.run(_execute())


def _drop_schema() -> None:
    async def _drop():
        engine = new_engine()
        try:
            await drop_schema(engine)
        finally:
            await engine.dispose()

    asyncio.run(_drop())


@pytest.fixture
def alembic_config():
    """Alembic config without an ini file, so logging stays as the test runner set it."""
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    _drop_schema()
    yield config
    _drop_schema()


def _constraint(name: str):
    rows = _run(
        "SELECT contype::text, condeferrable, condeferred FROM pg_constraint "
        "WHERE conname = :name",
        name=name,
    )
    return tuple(rows[0]) if rows else None


def test_upgrade_creates_task_constraints(alembic_config):
    command.upgrade(alembic_config, "head")

    [(indexdef,)] = _run(
        "SELECT indexdef FROM pg_indexes WHERE indexname = :name", name=ONE_ACTIVE_TASK_INDEX
    )
    assert "UNIQUE" in indexdef
    assert "WHERE" in indexdef and "in_progress" in indexdef

    contype, deferrable, deferred = _constraint("uq_task_client_status_position")
    assert (contype, deferrable, deferred) == ("u", True, True)

    assert _constraint(COMPLETED_AT_MATCHES_STATUS)[0] == "c"
    assert _constraint("ck_usage_log_hours_positive")[0] == "c"


def test_upgrade_seeds_reference_plans(alembic_config):
    command.upgrade(alembic_config, "head")

    rows = _run("SELECT code, hours_monthly FROM plan ORDER BY hours_monthly")

    assert [tuple(row) for row in rows] == [
        ("starter", 40),
        ("growth", 80),
        ("scale", 120),
        ("dedicated", 160),
    ]


def test_completion_check_backfills_existing_rows(alembic_config):
    command.upgrade(alembic_config, INITIAL_REVISION)
    now = datetime.now(timezone.utc)
    modified = now - timedelta(days=2)
    client_id = uuid.uuid4()
    done_id, queued_id = uuid.uuid4(), uuid.uuid4()
    _run(
        "INSERT INTO client (id, created_at, modified_at, name, cycle_start) "
        "VALUES (:id, :now, :now, 'Acme', :today)",
        id=client_id,
        now=now,
        today=now.date(),
    )
    for task_id, status, completed_at, position in (
        (done_id, "done", None, 0),
        (queued_id, "queued", now, 0),
    ):
        _run(
            "INSERT INTO task (id, created_at, modified_at, client_id, title, status, "
            "position, completed_at) "
            "VALUES (:id, :now, :modified, :client_id, 'Task', :status, :position, :completed)",
            id=task_id,
            now=now,
            modified=modified,
            client_id=client_id,
            status=status,
            position=position,
            completed=completed_at,
        )

    command.upgrade(alembic_config, "head")

    completed = {
        task_id: completed_at
        for task_id, completed_at in _run(
            "SELECT id, completed_at FROM task WHERE client_id = :id", id=client_id
        )
    }
    assert completed[done_id] == modified
    assert completed[queued_id] is None


def test_downgrade_removes_completion_check(alembic_config):
    command.upgrade(alembic_config, "head")
    command.downgrade(alembic_config, INITIAL_REVISION)

    assert _constraint(COMPLETED_AT_MATCHES_STATUS) is None
    assert _constraint("uq_task_client_status_position") is not None

    command.downgrade(alembic_config, "base")
    assert _run("SELECT to_regclass('task')::text")[0][0] is None

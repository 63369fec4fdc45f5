"""Initial schema: plan, client, task and usage_log.

Revision ID: a0c1e2f3b4d5
Revises:
Create Date: 2024-03-01 09:00:00.000000

"""

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision = "a0c1e2f3b4d5"
down_revision = None
branch_labels = None
depends_on = None

PLANS = [
    ("starter", "Starter", 40),
    ("growth", "Growth", 80),
    ("scale", "Scale", 120),
    ("dedicated", "Dedicated", 160),
]


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("modified_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade():
    """Create the four tables, their constraints and the plan reference data."""
    plan_table = op.create_table(
        "plan",
        *_audit_columns(),
        sa.Column("code", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("hours_monthly", sa.Integer(), nullable=False),
    )

    op.create_table(
        "client",
        *_audit_columns(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("plan_code", sa.String(50), nullable=True),
        sa.Column("hours_monthly", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "hours_used_month", sa.Numeric(10, 2), nullable=False, server_default="0"
        ),
        sa.Column("cycle_start", sa.Date(), nullable=False),
        sa.Column("payment_customer_ref", sa.String(), nullable=True, unique=True),
    )
    op.create_index("idx_client_cycle_start", "client", ["cycle_start"])

    op.create_table(
        "task",
        *_audit_columns(),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priority", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("status", sa.String(20), nullable=False, server_default="queued"),
        sa.Column("est_hours", sa.Integer(), nullable=True),
        sa.Column("hours_spent", sa.Numeric(10, 2), nullable=True),
        sa.Column("assigned_dev_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["client_id"], ["client.id"], name="fk_task_client_id", ondelete="CASCADE"
        ),
        sa.UniqueConstraint(
            "client_id",
            "status",
            "position",
            name="uq_task_client_status_position",
            deferrable=True,
            initially="DEFERRED",
        ),
    )
    op.create_index("idx_task_client_status", "task", ["client_id", "status"])
    # At most one in-progress task per client, enforced across processes
    op.create_index(
        "uq_task_one_in_progress_per_client",
        "task",
        ["client_id"],
        unique=True,
        postgresql_where=sa.text("status = 'in_progress'"),
    )

    op.create_table(
        "usage_log",
        *_audit_columns(),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("task_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("hours", sa.Numeric(10, 2), nullable=False),
        sa.Column("logged_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("logged_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["client_id"], ["client.id"], name="fk_usage_log_client_id", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["task_id"], ["task.id"], name="fk_usage_log_task_id", ondelete="SET NULL"
        ),
        sa.CheckConstraint("hours > 0", name="ck_usage_log_hours_positive"),
    )
    op.create_index(
        "idx_usage_log_client_logged_at", "usage_log", ["client_id", "logged_at"]
    )

    now = datetime.now(timezone.utc)
    op.bulk_insert(
        plan_table,
        [
            {
                "id": uuid.uuid4(),
                "created_at": now,
                "modified_at": now,
                "code": code,
                "name": name,
                "hours_monthly": hours,
            }
            for code, name, hours in PLANS
        ],
    )


def downgrade():
    """Drop every table created by this revision."""
    op.drop_table("usage_log")
    op.drop_table("task")
    op.drop_table("client")
    op.drop_table("plan")

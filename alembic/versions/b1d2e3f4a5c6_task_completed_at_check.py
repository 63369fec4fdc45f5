"""Require completed_at exactly when a task is done.

Revision ID: b1d2e3f4a5c6
Revises: a0c1e2f3b4d5
Create Date: 2024-03-18 10:30:00.000000

"""

from alembic import op

# revision identifiers, used by Alembic.
revision = "b1d2e3f4a5c6"
down_revision = "a0c1e2f3b4d5"
branch_labels = None
depends_on = None


def upgrade():
    """Backfill inconsistent rows, then add the check constraint."""
    op.execute(
        "UPDATE task SET completed_at = modified_at "
        "WHERE status = 'done' AND completed_at IS NULL"
    )
    op.execute("UPDATE task SET completed_at = NULL WHERE status <> 'done'")
    op.create_check_constraint(
        "ck_task_completed_at_iff_done",
        "task",
        "(status = 'done') = (completed_at IS NOT NULL)",
    )


def downgrade():
    """Drop the check constraint."""
    op.drop_constraint("ck_task_completed_at_iff_done", "task", type_="check")

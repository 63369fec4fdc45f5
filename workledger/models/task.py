"""Task model."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workledger.core.shared_models import TaskPriority, TaskStatus
from workledger.models._base import Base

if TYPE_CHECKING:
    from workledger.models.client import Client

ONE_ACTIVE_TASK_INDEX = "uq_task_one_in_progress_per_client"
COMPLETED_AT_MATCHES_STATUS = "ck_task_completed_at_iff_done"


class Task(Base):
    """A unit of work owned by a client."""

    __tablename__ = "task"

    client_id: Mapped[UUID] = mapped_column(
        ForeignKey("client.id", ondelete="CASCADE", name="fk_task_client_id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    priority: Mapped[str] = mapped_column(String(20), default=TaskPriority.MEDIUM.value)
    status: Mapped[str] = mapped_column(String(20), default=TaskStatus.QUEUED.value)
    est_hours: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    hours_spent: Mapped[Optional[float]] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=True
    )
    assigned_dev_id: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    client: Mapped["Client"] = relationship("Client", back_populates="tasks", lazy="noload")

    __table_args__ = (
        # At most one in-progress task per client
        Index(
            ONE_ACTIVE_TASK_INDEX,
            "client_id",
            unique=True,
            postgresql_where=text("status = 'in_progress'"),
            sqlite_where=text("status = 'in_progress'"),
        ),
        # Deferred so a reorder batch may swap positions inside one transaction
        UniqueConstraint(
            "client_id",
            "status",
            "position",
            name="uq_task_client_status_position",
            deferrable=True,
            initially="DEFERRED",
        ),
        # completed_at is set exactly when the task is done
        CheckConstraint(
            "(status = 'done') = (completed_at IS NOT NULL)",
            name=COMPLETED_AT_MATCHES_STATUS,
        ),
        Index("idx_task_client_status", "client_id", "status"),
    )

"""Usage log model: the append-only hours ledger."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from workledger.models._base import Base


class UsageLog(Base):
    """Immutable record of hours consumed against a client's capacity."""

    __tablename__ = "usage_log"

    client_id: Mapped[UUID] = mapped_column(
        ForeignKey("client.id", ondelete="CASCADE", name="fk_usage_log_client_id"),
        nullable=False,
    )
    task_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("task.id", ondelete="SET NULL", name="fk_usage_log_task_id"), nullable=True
    )
    hours: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    logged_by: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True)
    logged_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("hours > 0", name="ck_usage_log_hours_positive"),
        Index("idx_usage_log_client_logged_at", "client_id", "logged_at"),
    )

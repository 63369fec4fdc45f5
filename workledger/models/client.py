"""Client model."""

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workledger.models._base import Base

if TYPE_CHECKING:
    from workledger.models.task import Task


class Client(Base):
    """A billed tenant with a capacity plan.

    ``hours_used_month`` is a cache of the usage ledger aggregate for the
    current cycle; the ledger is the source of truth.
    """

    __tablename__ = "client"

    name: Mapped[str] = mapped_column(String, nullable=False)
    plan_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    hours_monthly: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hours_used_month: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False, default=0.0
    )
    cycle_start: Mapped[date] = mapped_column(Date, nullable=False)
    payment_customer_ref: Mapped[Optional[str]] = mapped_column(
        String, nullable=True, unique=True
    )

    tasks: Mapped[list["Task"]] = relationship(
        "Task",
        back_populates="client",
        lazy="noload",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("idx_client_cycle_start", "cycle_start"),)

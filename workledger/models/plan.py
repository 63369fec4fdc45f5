"""Plan model: read-only capacity reference data."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from workledger.models._base import Base


class Plan(Base):
    """Plan model."""

    __tablename__ = "plan"

    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    hours_monthly: Mapped[int] = mapped_column(Integer, nullable=False)

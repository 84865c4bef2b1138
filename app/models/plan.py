"""
Plan model.

Reference data: payout paid to the top of a completed triangle.
"""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.types import MoneyType


class Plan(Base):
    """Plan model - one row per plan type."""

    __tablename__ = "plans"
    __table_args__ = (
        CheckConstraint('payout > 0', name='check_plan_payout_positive'),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True, index=True
    )
    payout: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)

"""
Triangle models.

A triangle is one 15-slot instance of the referral structure for a plan.
Its slots are TrianglePosition rows, created together with the triangle.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Triangle(Base):
    """
    Triangle entity.

    Attributes:
        id: Primary key (ascending id == creation order)
        plan_type: Plan the triangle belongs to
        is_complete: All 15 slots occupied (one-way flag)
        completed_at: When the last slot was filled
        payout_processed: Top occupant was paid
        created_at: Creation timestamp
    """

    __tablename__ = "triangles"
    __table_args__ = (
        Index("idx_triangles_plan_open", "plan_type", "is_complete"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    plan_type: Mapped[str] = mapped_column(String(50), nullable=False)
    is_complete: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    payout_processed: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )


class TrianglePosition(Base):
    """
    One slot of a triangle.

    The slot shape (level, index, position_key) never changes after creation;
    only occupant_id is written, and at most once.
    """

    __tablename__ = "triangle_positions"
    __table_args__ = (
        UniqueConstraint(
            "triangle_id", "level", "index",
            name="uq_triangle_positions_slot",
        ),
        UniqueConstraint(
            "triangle_id", "position_key",
            name="uq_triangle_positions_key",
        ),
        CheckConstraint(
            'level >= 1 AND level <= 4',
            name='check_triangle_position_level_range'
        ),
        Index("idx_triangle_positions_occupant", "occupant_id"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    triangle_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("triangles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    index: Mapped[int] = mapped_column(Integer, nullable=False)
    position_key: Mapped[str] = mapped_column(String(8), nullable=False)
    occupant_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

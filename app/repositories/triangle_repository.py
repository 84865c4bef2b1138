"""
Triangle repository.

Data access layer for Triangle model.
"""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.triangle_structure import TRIANGLE_STRUCTURE
from app.models.triangle import Triangle, TrianglePosition
from app.repositories.base import BaseRepository
from app.repositories.filters import TriangleFilter


class TriangleRepository(BaseRepository[Triangle]):
    """Triangle repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize triangle repository."""
        super().__init__(Triangle, session)

    async def create_with_positions(self, plan_type: str) -> Triangle:
        """
        Create empty triangle together with its 15 positions.

        Positions are inserted in canonical fill order.

        Args:
            plan_type: Plan type

        Returns:
            Created triangle
        """
        triangle = await self.create(
            plan_type=plan_type,
            is_complete=False,
            payout_processed=False,
        )

        self.session.add_all(
            [
                TrianglePosition(
                    triangle_id=triangle.id,
                    level=slot.level,
                    index=slot.index,
                    position_key=slot.key,
                    occupant_id=None,
                )
                for slot in TRIANGLE_STRUCTURE
            ]
        )
        await self.session.flush()
        return triangle

    async def get_for_update(self, triangle_id: int) -> Triangle | None:
        """
        Get triangle and lock its row until the transaction ends.

        Args:
            triangle_id: Triangle ID

        Returns:
            Fresh triangle state or None if deleted
        """
        stmt = (
            select(Triangle)
            .where(Triangle.id == triangle_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_oldest_open(self, plan_type: str) -> Triangle | None:
        """
        Get oldest incomplete triangle of a plan that has an empty slot.

        Args:
            plan_type: Plan type

        Returns:
            Triangle or None
        """
        return await self.get_by(
            TriangleFilter(
                plan_type=plan_type,
                is_complete=False,
                has_open_slot=True,
            )
        )

    async def mark_complete(
        self, triangle_id: int, completed_at: datetime
    ) -> bool:
        """
        Flip is_complete from False to True.

        Args:
            triangle_id: Triangle ID
            completed_at: Completion timestamp

        Returns:
            True if this call performed the transition
        """
        stmt = (
            update(Triangle)
            .where(
                Triangle.id == triangle_id,
                Triangle.is_complete == False,  # noqa: E712
            )
            .values(is_complete=True, completed_at=completed_at)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

"""
Triangle position repository.

Data access layer for TrianglePosition model.
"""

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.triangle import TrianglePosition
from app.repositories.base import BaseRepository
from app.repositories.filters import PositionFilter


class TrianglePositionRepository(BaseRepository[TrianglePosition]):
    """Triangle position repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize triangle position repository."""
        super().__init__(TrianglePosition, session)

    async def find_open_slot(
        self, triangle_id: int
    ) -> TrianglePosition | None:
        """
        Get next empty slot in canonical fill order.

        Args:
            triangle_id: Triangle ID

        Returns:
            Empty position with smallest (level, index) or None
        """
        stmt = (
            select(TrianglePosition)
            .where(*PositionFilter(triangle_id=triangle_id, is_open=True).clauses())
            .order_by(TrianglePosition.level.asc(), TrianglePosition.index.asc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_occupant(self, position_id: int, user_id: int) -> bool:
        """
        Claim an empty slot for user.

        Conditional single-row update: succeeds only while the slot is
        still empty, so a slot is never reassigned.

        Args:
            position_id: Position ID
            user_id: User ID

        Returns:
            True if the slot was claimed, False if it was already taken
        """
        stmt = (
            update(TrianglePosition)
            .where(
                TrianglePosition.id == position_id,
                TrianglePosition.occupant_id.is_(None),
            )
            .values(occupant_id=user_id)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def set_occupant_by_key(
        self, triangle_id: int, position_key: str, user_id: int
    ) -> bool:
        """
        Claim the empty slot with given key.

        Args:
            triangle_id: Triangle ID
            position_key: Position key (e.g. "AB1")
            user_id: User ID

        Returns:
            True if the slot was claimed
        """
        stmt = (
            update(TrianglePosition)
            .where(
                TrianglePosition.triangle_id == triangle_id,
                TrianglePosition.position_key == position_key,
                TrianglePosition.occupant_id.is_(None),
            )
            .values(occupant_id=user_id)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def get_by_key(
        self, triangle_id: int, position_key: str
    ) -> TrianglePosition | None:
        """Get position of a triangle by key."""
        return await self.get_by(
            PositionFilter(triangle_id=triangle_id, position_key=position_key)
        )

    async def count_occupied(self, triangle_id: int) -> int:
        """
        Count occupied slots of a triangle.

        Args:
            triangle_id: Triangle ID

        Returns:
            Number of slots with an occupant (0..15)
        """
        return await self.count(
            PositionFilter(triangle_id=triangle_id, is_open=False)
        )

    async def list_with_occupants(
        self, triangle_id: int
    ) -> list[TrianglePosition]:
        """
        Get all positions of a triangle in canonical order.

        Args:
            triangle_id: Triangle ID

        Returns:
            Positions ordered by (level, index), occupied or not
        """
        stmt = (
            select(TrianglePosition)
            .where(*PositionFilter(triangle_id=triangle_id).clauses())
            .order_by(TrianglePosition.level.asc(), TrianglePosition.index.asc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_most_recent_for_user(
        self, user_id: int
    ) -> TrianglePosition | None:
        """
        Get user's most recently created position.

        Args:
            user_id: User ID

        Returns:
            Position with the highest id occupied by user, or None
        """
        stmt = (
            select(TrianglePosition)
            .where(*PositionFilter(occupant_id=user_id).clauses())
            .order_by(TrianglePosition.id.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_all(self, triangle_id: int) -> int:
        """
        Delete every position of a triangle.

        Args:
            triangle_id: Triangle ID

        Returns:
            Number of deleted positions
        """
        stmt = delete(TrianglePosition).where(
            TrianglePosition.triangle_id == triangle_id
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

"""
Cycling engine.

Splits a completed triangle into two successor triangles and retires it.

The AB1 occupant heads the left successor and the AB2 occupant the right
one; occupants listed in the promotion maps move one level up into the
successor built from their half. Everyone else (the paid top occupant)
leaves the matrix. Without both AB1 and AB2 there is no split at all.
The old triangle and its positions are always hard-deleted.
"""

from dataclasses import dataclass, field

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.triangle_structure import (
    LEFT_BRANCH_KEY,
    LEFT_PROMOTION_MAP,
    RIGHT_BRANCH_KEY,
    RIGHT_PROMOTION_MAP,
    TOP_POSITION_KEY,
)
from app.models.triangle import Triangle
from app.repositories.triangle_position_repository import (
    TrianglePositionRepository,
)
from app.repositories.triangle_repository import TriangleRepository
from app.utils.exceptions import NotFoundError


@dataclass
class CycleResult:
    """Outcome of cycling one triangle."""

    triangle_id: int
    successor_ids: list[int] = field(default_factory=list)
    dropped_user_ids: list[int] = field(default_factory=list)

    @property
    def did_split(self) -> bool:
        return bool(self.successor_ids)


class CyclingEngine:
    """Split completed triangles into successors."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize cycling engine.

        Args:
            session: Async database session
        """
        self.session = session
        self.triangle_repo = TriangleRepository(session)
        self.position_repo = TrianglePositionRepository(session)

    async def cycle(self, triangle_id: int) -> CycleResult:
        """
        Split triangle and delete it.

        Must run inside the caller's transaction so the whole
        create/move/delete sequence commits or rolls back together.

        Args:
            triangle_id: Triangle ID

        Returns:
            CycleResult with successor ids and dropped occupants

        Raises:
            NotFoundError: If triangle does not exist
        """
        triangle = await self.triangle_repo.get_for_update(triangle_id)
        if not triangle:
            raise NotFoundError("Triangle", triangle_id)

        positions = await self.position_repo.list_with_occupants(triangle_id)
        occupants = {p.position_key: p.occupant_id for p in positions}

        left_top = occupants.get(LEFT_BRANCH_KEY)
        right_top = occupants.get(RIGHT_BRANCH_KEY)

        result = CycleResult(triangle_id=triangle_id)
        kept_keys: set[str] = set()

        if left_top is not None and right_top is not None:
            left = await self._build_successor(
                triangle, left_top, LEFT_PROMOTION_MAP, occupants
            )
            right = await self._build_successor(
                triangle, right_top, RIGHT_PROMOTION_MAP, occupants
            )
            result.successor_ids = [left.id, right.id]
            kept_keys = {
                LEFT_BRANCH_KEY,
                RIGHT_BRANCH_KEY,
                *LEFT_PROMOTION_MAP,
                *RIGHT_PROMOTION_MAP,
            }
        else:
            logger.warning(
                "Triangle cycled without split",
                extra={
                    "triangle_id": triangle_id,
                    "ab1_occupied": left_top is not None,
                    "ab2_occupied": right_top is not None,
                },
            )

        result.dropped_user_ids = [
            user_id
            for key, user_id in occupants.items()
            if user_id is not None and key not in kept_keys
        ]

        deleted = await self.position_repo.delete_all(triangle_id)
        await self.triangle_repo.delete(triangle_id)

        logger.info(
            "Triangle cycled",
            extra={
                "triangle_id": triangle_id,
                "plan_type": triangle.plan_type,
                "successor_ids": result.successor_ids,
                "dropped_user_ids": result.dropped_user_ids,
                "positions_deleted": deleted,
            },
        )
        return result

    async def _build_successor(
        self,
        source: Triangle,
        top_user_id: int,
        promotion_map: dict[str, str],
        occupants: dict[str, int | None],
    ) -> Triangle:
        """Create successor headed by top_user_id and promote mapped occupants."""
        successor = await self.triangle_repo.create_with_positions(
            source.plan_type
        )
        await self.position_repo.set_occupant_by_key(
            successor.id, TOP_POSITION_KEY, top_user_id
        )

        for old_key, new_key in promotion_map.items():
            user_id = occupants.get(old_key)
            if user_id is None:
                continue
            await self.position_repo.set_occupant_by_key(
                successor.id, new_key, user_id
            )

        return successor

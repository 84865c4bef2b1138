"""
Placement engine.

Chooses a triangle and slot for a user and records the assignment.

Target selection, in order:
1. the referrer's most recent triangle, if same plan, incomplete and open;
2. the oldest open triangle of the user's plan;
3. a brand-new triangle.

The chosen triangle row is locked before its slot is claimed, and the
claim itself only succeeds on an empty slot. Losing a race re-runs target
selection. Filling the 15th slot completes the triangle in the same
transaction.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.config.triangle_structure import TRIANGLE_SIZE
from app.models.triangle import Triangle, TrianglePosition
from app.models.user import User
from app.repositories.filters import PositionFilter
from app.repositories.triangle_position_repository import (
    TrianglePositionRepository,
)
from app.repositories.triangle_repository import TriangleRepository
from app.repositories.user_repository import UserRepository
from app.services.triangle.completion_handler import CompletionHandler
from app.utils.exceptions import (
    NoAvailablePositionError,
    NotFoundError,
    PlacementConflictError,
)


class PlacementEngine:
    """Place users into triangles."""

    def __init__(
        self,
        session: AsyncSession,
        completion_handler: CompletionHandler | None = None,
        max_attempts: int | None = None,
    ) -> None:
        """
        Initialize placement engine.

        Args:
            session: Async database session
            completion_handler: Completion handler (built from session if omitted)
            max_attempts: Target selections per placement
                (defaults to settings.placement_max_attempts)
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.triangle_repo = TriangleRepository(session)
        self.position_repo = TrianglePositionRepository(session)
        self.completion_handler = completion_handler or CompletionHandler(session)
        self.max_attempts = max_attempts or settings.placement_max_attempts

    async def create_triangle(self, plan_type: str) -> Triangle:
        """
        Create empty triangle with all 15 positions.

        Args:
            plan_type: Plan type

        Returns:
            Created triangle
        """
        triangle = await self.triangle_repo.create_with_positions(plan_type)
        logger.info(
            "Triangle created",
            extra={"triangle_id": triangle.id, "plan_type": plan_type},
        )
        return triangle

    async def assign(
        self, user_id: int, referrer_id: int | None = None
    ) -> TrianglePosition:
        """
        Place user into the next open slot of the best target triangle.

        Args:
            user_id: User to place
            referrer_id: Referrer (defaults to the user's upline)

        Returns:
            The position that was filled

        Raises:
            NotFoundError: If user does not exist
            NoAvailablePositionError: If an open triangle has no empty slot
            PlacementConflictError: If every attempt lost a concurrent race
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)

        candidate_referrer = (
            referrer_id if referrer_id is not None else user.upline_id
        )

        for attempt in range(1, self.max_attempts + 1):
            target = await self._select_target(user, candidate_referrer)

            # Serialize placement and completion on this triangle
            triangle = await self.triangle_repo.get_for_update(target.id)
            if triangle is None or triangle.is_complete:
                logger.debug(
                    "Target triangle closed before lock, retrying",
                    extra={"triangle_id": target.id, "attempt": attempt},
                )
                continue

            slot = await self.position_repo.find_open_slot(triangle.id)
            if slot is None:
                raise NoAvailablePositionError(triangle.id)

            if not await self.position_repo.set_occupant(slot.id, user.id):
                logger.warning(
                    "Slot taken concurrently, retrying",
                    extra={
                        "user_id": user.id,
                        "triangle_id": triangle.id,
                        "position_key": slot.position_key,
                        "attempt": attempt,
                    },
                )
                continue

            logger.info(
                "User placed in triangle",
                extra={
                    "user_id": user.id,
                    "triangle_id": triangle.id,
                    "position_key": slot.position_key,
                    "referrer_id": candidate_referrer,
                },
            )

            filled = await self.position_repo.count_occupied(triangle.id)
            if filled == TRIANGLE_SIZE:
                await self.completion_handler.on_complete(triangle.id)

            return slot

        raise PlacementConflictError(user.id, self.max_attempts)

    async def _select_target(
        self, user: User, referrer_id: int | None
    ) -> Triangle:
        """Referrer's triangle, else oldest open triangle, else a new one."""
        if referrer_id is not None:
            triangle = await self._referrer_triangle(referrer_id, user.plan)
            if triangle:
                return triangle

        triangle = await self.triangle_repo.find_oldest_open(user.plan)
        if triangle:
            return triangle

        return await self.create_triangle(user.plan)

    async def _referrer_triangle(
        self, referrer_id: int, plan_type: str
    ) -> Triangle | None:
        """Referrer's most recent triangle if it can take this user."""
        position = await self.position_repo.find_most_recent_for_user(
            referrer_id
        )
        if not position:
            return None

        triangle = await self.triangle_repo.get_by_id(position.triangle_id)
        if (
            triangle is None
            or triangle.plan_type != plan_type
            or triangle.is_complete
        ):
            return None

        has_open_slot = await self.position_repo.exists(
            PositionFilter(triangle_id=triangle.id, is_open=True)
        )
        return triangle if has_open_slot else None

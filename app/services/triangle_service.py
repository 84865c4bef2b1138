"""
Triangle service.

Public entry point of the triangle engine for HTTP handlers and admin
tooling. Every write operation runs as one transaction on the session
given to the constructor.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.triangle_structure import TRIANGLE_SIZE
from app.models.triangle import Triangle, TrianglePosition
from app.models.user import User
from app.repositories.triangle_position_repository import (
    TrianglePositionRepository,
)
from app.repositories.triangle_repository import TriangleRepository
from app.services.base_service import BaseService, transaction
from app.services.triangle import (
    CompletionHandler,
    CompletionResult,
    CycleResult,
    CyclingEngine,
    PayoutProcessor,
    PlacementEngine,
    ReferrerResolver,
)
from app.utils.exceptions import NotFoundError


@dataclass
class TriangleInfo:
    """User's current triangle with fill statistics."""

    triangle: Triangle
    user_position: TrianglePosition
    positions: list[TrianglePosition]
    filled_count: int
    completion_percent: float


class TriangleService(BaseService):
    """Triangle lifecycle service."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize triangle service."""
        super().__init__(session)
        self.triangle_repo = TriangleRepository(session)
        self.position_repo = TrianglePositionRepository(session)
        self.resolver = ReferrerResolver(session)
        self.cycling_engine = CyclingEngine(session)
        self.completion_handler = CompletionHandler(
            session,
            payout_processor=PayoutProcessor(session),
            cycling_engine=self.cycling_engine,
        )
        self.placement_engine = PlacementEngine(
            session, completion_handler=self.completion_handler
        )

    @transaction
    async def assign(
        self, user_id: int, referrer_id: int | None = None
    ) -> TrianglePosition:
        """
        Place user into a triangle.

        Args:
            user_id: User ID
            referrer_id: Referrer ID (defaults to the user's upline)

        Returns:
            Filled position
        """
        return await self.placement_engine.assign(user_id, referrer_id)

    @transaction
    async def assign_by_token(
        self, user_id: int, referral_token: str | None
    ) -> TrianglePosition:
        """
        Resolve referral token and place user.

        An unresolved token falls back to the user's upline.

        Args:
            user_id: User ID
            referral_token: Token from the signup link

        Returns:
            Filled position
        """
        referrer = await self.resolver.resolve(referral_token)
        referrer_id = referrer.id if referrer else None
        if referrer is None and referral_token:
            self.logger.info(
                "Referral token not resolved",
                extra={"user_id": user_id, "token": referral_token},
            )
        return await self.placement_engine.assign(user_id, referrer_id)

    @transaction
    async def create_triangle(self, plan_type: str) -> Triangle:
        """
        Create empty triangle for plan.

        Args:
            plan_type: Plan type

        Returns:
            Created triangle
        """
        return await self.placement_engine.create_triangle(plan_type)

    @transaction
    async def complete_triangle(
        self, triangle_id: int
    ) -> CompletionResult | None:
        """
        Run completion for a full triangle (admin tooling).

        Args:
            triangle_id: Triangle ID

        Returns:
            CompletionResult, or None if it was already completed

        Raises:
            NotFoundError: If triangle does not exist
            ValueError: If triangle still has empty slots
        """
        triangle = await self.triangle_repo.get_for_update(triangle_id)
        if not triangle:
            raise NotFoundError("Triangle", triangle_id)

        filled = await self.position_repo.count_occupied(triangle_id)
        if filled != TRIANGLE_SIZE:
            raise ValueError(
                f"Triangle {triangle_id} has {filled}/{TRIANGLE_SIZE} slots filled"
            )

        return await self.completion_handler.on_complete(triangle_id)

    @transaction
    async def cycle_triangle(self, triangle_id: int) -> CycleResult:
        """
        Split and delete triangle (admin tooling).

        Args:
            triangle_id: Triangle ID

        Returns:
            CycleResult
        """
        return await self.cycling_engine.cycle(triangle_id)

    async def get_user_triangle_info(self, user_id: int) -> TriangleInfo | None:
        """
        Get user's most recent triangle with fill statistics.

        Args:
            user_id: User ID

        Returns:
            TriangleInfo or None if user holds no position
        """
        position = await self.position_repo.find_most_recent_for_user(user_id)
        if not position:
            return None

        triangle = await self.triangle_repo.get_by_id(position.triangle_id)
        if not triangle:
            return None

        positions = await self.position_repo.list_with_occupants(triangle.id)
        filled = sum(1 for p in positions if p.occupant_id is not None)

        return TriangleInfo(
            triangle=triangle,
            user_position=position,
            positions=positions,
            filled_count=filled,
            completion_percent=filled / TRIANGLE_SIZE * 100,
        )

    async def resolve_referrer(self, token: str | None) -> User | None:
        """
        Resolve referral token to a user.

        Args:
            token: Referral token

        Returns:
            User or None
        """
        return await self.resolver.resolve(token)

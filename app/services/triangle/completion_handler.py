"""
Completion handler.

Marks a full triangle complete, pays its top occupant and cycles it.
"""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.triangle_structure import TOP_POSITION_KEY
from app.models.transaction import Transaction
from app.repositories.triangle_position_repository import (
    TrianglePositionRepository,
)
from app.repositories.triangle_repository import TriangleRepository
from app.services.triangle.cycling_engine import CycleResult, CyclingEngine
from app.services.triangle.payout_processor import PayoutProcessor
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import NotFoundError


@dataclass
class CompletionResult:
    """Outcome of completing one triangle."""

    triangle_id: int
    top_user_id: int | None
    payout: Transaction | None
    cycle: CycleResult


class CompletionHandler:
    """Handle the transition of a triangle to complete."""

    def __init__(
        self,
        session: AsyncSession,
        payout_processor: PayoutProcessor | None = None,
        cycling_engine: CyclingEngine | None = None,
    ) -> None:
        """
        Initialize completion handler.

        Args:
            session: Async database session
            payout_processor: Payout processor (built from session if omitted)
            cycling_engine: Cycling engine (built from session if omitted)
        """
        self.session = session
        self.triangle_repo = TriangleRepository(session)
        self.position_repo = TrianglePositionRepository(session)
        self.payout_processor = payout_processor or PayoutProcessor(session)
        self.cycling_engine = cycling_engine or CyclingEngine(session)

    async def on_complete(self, triangle_id: int) -> CompletionResult | None:
        """
        Complete triangle: mark, pay top occupant, cycle.

        Only the caller that flips is_complete proceeds; a repeated
        trigger for the same triangle returns None.

        Args:
            triangle_id: Triangle ID

        Returns:
            CompletionResult, or None if already completed elsewhere

        Raises:
            NotFoundError: If triangle does not exist
        """
        triangle = await self.triangle_repo.get_by_id(triangle_id)
        if not triangle:
            raise NotFoundError("Triangle", triangle_id)

        if not await self.triangle_repo.mark_complete(triangle_id, utc_now()):
            logger.warning(
                "Duplicate completion trigger ignored",
                extra={"triangle_id": triangle_id},
            )
            return None

        logger.info(
            "Triangle completed",
            extra={"triangle_id": triangle_id, "plan_type": triangle.plan_type},
        )

        top = await self.position_repo.get_by_key(triangle_id, TOP_POSITION_KEY)
        top_user_id = top.occupant_id if top else None

        payout = None
        if top_user_id is not None:
            payout = await self.payout_processor.pay(
                top_user_id, triangle.plan_type
            )
            if payout is not None:
                await self.triangle_repo.update(
                    triangle_id, payout_processed=True
                )
        else:
            logger.error(
                "Completed triangle has no top occupant",
                extra={"triangle_id": triangle_id},
            )

        # Cycle even without a top occupant
        cycle = await self.cycling_engine.cycle(triangle_id)

        return CompletionResult(
            triangle_id=triangle_id,
            top_user_id=top_user_id,
            payout=payout,
            cycle=cycle,
        )

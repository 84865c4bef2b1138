"""
Payout processor.

Pays the top occupant of a completed triangle: records a pending
withdrawal and credits the user's balance right away.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models.enums import TransactionStatus, TransactionType
from app.models.transaction import Transaction
from app.repositories.plan_repository import PlanRepository
from app.repositories.transaction_repository import TransactionRepository
from app.repositories.user_repository import UserRepository
from app.utils.datetime_utils import withdrawal_reference


class PayoutProcessor:
    """Credit triangle completion payouts."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize payout processor.

        Args:
            session: Async database session
        """
        self.session = session
        self.plan_repo = PlanRepository(session)
        self.transaction_repo = TransactionRepository(session)
        self.user_repo = UserRepository(session)

    async def pay(self, user_id: int, plan_type: str) -> Transaction | None:
        """
        Pay plan payout to user.

        The balance is credited before the withdrawal is confirmed.
        A missing plan is not an error: nothing is paid and None is
        returned.

        Args:
            user_id: Top occupant of the completed triangle
            plan_type: Triangle plan type

        Returns:
            Created PENDING withdrawal, or None if the plan is missing
        """
        plan = await self.plan_repo.get_by_name(plan_type)
        if not plan:
            logger.warning(
                "Plan not found, triangle payout skipped",
                extra={"user_id": user_id, "plan_type": plan_type},
            )
            return None

        withdrawal = await self.transaction_repo.create(
            user_id=user_id,
            type=TransactionType.WITHDRAWAL,
            amount=plan.payout,
            status=TransactionStatus.PENDING,
            transaction_id=withdrawal_reference(),
            description=settings.payout_description,
        )

        # Atomic increment, no read-modify-write
        await self.user_repo.credit_balance(user_id, plan.payout)

        logger.info(
            "Triangle payout credited",
            extra={
                "user_id": user_id,
                "plan_type": plan_type,
                "amount": str(plan.payout),
                "transaction_id": withdrawal.transaction_id,
            },
        )
        return withdrawal

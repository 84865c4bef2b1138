"""
Transaction repository.

Data access layer for Transaction model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import TransactionStatus, TransactionType
from app.models.transaction import Transaction
from app.repositories.base import BaseRepository
from app.repositories.filters import TransactionFilter


class TransactionRepository(BaseRepository[Transaction]):
    """Transaction repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction repository."""
        super().__init__(Transaction, session)

    async def find_by_user(
        self,
        user_id: int,
        type: TransactionType | None = None,
        status: TransactionStatus | None = None,
    ) -> list[Transaction]:
        """
        Get user transactions, oldest first.

        Args:
            user_id: User ID
            type: Optional type filter
            status: Optional status filter

        Returns:
            List of transactions
        """
        return await self.find_all(
            TransactionFilter(user_id=user_id, type=type, status=status)
        )

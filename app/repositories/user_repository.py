"""
User repository.

Data access layer for User model.
"""

from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.base import BaseRepository
from app.repositories.filters import UserFilter


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_username(self, username: str) -> User | None:
        """
        Get user by exact username.

        Args:
            username: Username

        Returns:
            User or None
        """
        if not username:
            return None
        return await self.get_by(UserFilter(username=username))

    async def get_by_referral_code(
        self, referral_code: str
    ) -> User | None:
        """
        Get user by referral code.

        Args:
            referral_code: Referral code

        Returns:
            User or None
        """
        if not referral_code:
            return None
        return await self.get_by(UserFilter(referral_code=referral_code))

    async def find_by_id_suffix(
        self, suffix: str, batch_size: int = 1000
    ) -> User | None:
        """
        Find first user (creation order) whose id ends with suffix.

        Case-insensitive. Scans the users table in batches of ids, so
        it costs O(number of users): use only as a last resort.

        Args:
            suffix: Trailing part of the id
            batch_size: Ids fetched per query

        Returns:
            User or None
        """
        needle = suffix.lower()
        last_id = 0

        while True:
            stmt = (
                select(User.id)
                .where(User.id > last_id)
                .order_by(User.id.asc())
                .limit(batch_size)
            )
            result = await self.session.execute(stmt)
            ids = list(result.scalars().all())
            if not ids:
                return None

            for user_id in ids:
                if str(user_id).lower().endswith(needle):
                    return await self.get_by_id(user_id)

            last_id = ids[-1]

    async def credit_balance(self, user_id: int, amount: Decimal) -> bool:
        """
        Atomically add amount to balance and total_earned.

        Args:
            user_id: User ID
            amount: Amount to credit

        Returns:
            True if user row was updated
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                balance=User.balance + amount,
                total_earned=User.total_earned + amount,
            )
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

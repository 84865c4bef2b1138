"""
Referrer resolver.

Turns a referral token from a signup link into a user. Strategies are
tried in priority order and the first match wins.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.models.user import User
from app.repositories.user_repository import UserRepository

# Largest value of a 32-bit signed integer primary key
MAX_USER_ID = 2**31 - 1


def is_valid_user_id(token: str) -> bool:
    """
    Check if token is syntactically a user id.

    Args:
        token: Raw token

    Returns:
        True for a canonical decimal string that fits the id column
    """
    if not token.isascii() or not token.isdigit():
        return False
    # Canonical form only: "007" is not id 7
    if str(int(token)) != token:
        return False
    return 0 < int(token) <= MAX_USER_ID


class ReferrerResolver:
    """Resolve referral tokens: id, username, referral code, id suffix."""

    def __init__(
        self,
        session: AsyncSession,
        suffix_min_length: int | None = None,
    ) -> None:
        """
        Initialize resolver.

        Args:
            session: Async database session
            suffix_min_length: Shortest token tried as id suffix
                (defaults to settings.referrer_suffix_min_length)
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.suffix_min_length = (
            suffix_min_length
            if suffix_min_length is not None
            else settings.referrer_suffix_min_length
        )

    async def resolve(self, token: str | None) -> User | None:
        """
        Resolve token to a user.

        Order: exact id, exact username, exact referral code,
        then case-insensitive id suffix scan.

        Args:
            token: Referral token

        Returns:
            Matching user or None
        """
        token = (token or "").strip()
        if not token:
            return None

        if is_valid_user_id(token):
            user = await self.user_repo.get_by_id(int(token))
            if user:
                logger.debug("Referrer resolved by id", extra={"token": token})
                return user

        user = await self.user_repo.get_by_username(token)
        if user:
            logger.debug("Referrer resolved by username", extra={"token": token})
            return user

        user = await self.user_repo.get_by_referral_code(token)
        if user:
            logger.debug(
                "Referrer resolved by referral code", extra={"token": token}
            )
            return user

        if len(token) < self.suffix_min_length:
            return None

        # Last resort: truncated codes copied from the id
        logger.debug("Falling back to id suffix scan", extra={"token": token})
        return await self.user_repo.find_by_id_suffix(token)

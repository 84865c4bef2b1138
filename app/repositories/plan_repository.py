"""
Plan repository.

Read-only access to plan reference data.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.plan import Plan
from app.repositories.base import BaseRepository


class PlanRepository(BaseRepository[Plan]):
    """Plan repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize plan repository."""
        super().__init__(Plan, session)

    async def get_by_name(self, name: str) -> Plan | None:
        """
        Get plan by name (the plan type).

        Args:
            name: Plan type

        Returns:
            Plan or None
        """
        stmt = select(Plan).where(Plan.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

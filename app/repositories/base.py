"""
Base repository.

Generic CRUD operations for all repositories.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import Base
from app.repositories.filters import QueryFilter

# Generic type for model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with generic CRUD operations.

    Provides async database operations for any SQLAlchemy model.
    The session is the transaction scope: repositories flush but never
    commit.

    Type Parameters:
        ModelType: SQLAlchemy model class

    Example:
        class UserRepository(BaseRepository[User]):
            def __init__(self, session: AsyncSession):
                super().__init__(User, session)
    """

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def get_by_id(self, id: int) -> ModelType | None:
        """
        Get entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity or None if not found
        """
        return await self.session.get(self.model, id)

    async def get_by(self, filter_: QueryFilter) -> ModelType | None:
        """
        Get first entity matching filter, in creation order.

        Args:
            filter_: Typed filter

        Returns:
            First matching entity or None
        """
        stmt = (
            select(self.model)
            .where(*filter_.clauses())
            .order_by(self.model.id.asc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_all(
        self,
        filter_: QueryFilter | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[ModelType]:
        """
        Find all entities matching filter, in creation order.

        Args:
            filter_: Typed filter (None matches everything)
            limit: Max number of results
            offset: Number of results to skip

        Returns:
            List of matching entities
        """
        stmt = (
            select(self.model)
            .order_by(self.model.id.asc())
            .execution_options(populate_existing=True)
        )
        if filter_ is not None:
            stmt = stmt.where(*filter_.clauses())

        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **data: Any) -> ModelType:
        """
        Create new entity.

        Args:
            **data: Entity data

        Returns:
            Created entity
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update(self, id: int, **data: Any) -> bool:
        """
        Update entity columns by ID in a single statement.

        Args:
            id: Entity ID
            **data: Updated column values

        Returns:
            True if a row was updated
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values(**data)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def delete(self, id: int) -> bool:
        """
        Delete entity by ID.

        Args:
            id: Entity ID

        Returns:
            True if deleted, False if not found
        """
        stmt = delete(self.model).where(self.model.id == id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def count(self, filter_: QueryFilter | None = None) -> int:
        """
        Count entities matching filter.

        Args:
            filter_: Typed filter (None counts everything)

        Returns:
            Count of matching entities
        """
        stmt = select(func.count()).select_from(self.model)

        if filter_ is not None:
            stmt = stmt.where(*filter_.clauses())

        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def exists(self, filter_: QueryFilter) -> bool:
        """
        Check if entity exists.

        Args:
            filter_: Typed filter

        Returns:
            True if exists, False otherwise
        """
        count = await self.count(filter_)
        return count > 0

"""Fixtures for database-backed tests."""

import pytest
from sqlalchemy import func, select

from app.models import Triangle, TrianglePosition
from app.services.triangle_service import TriangleService


@pytest.fixture
def service(session):
    """TriangleService on the test session."""
    return TriangleService(session)


@pytest.fixture
def read_occupants(session_maker):
    """
    Read committed occupants of a triangle from a fresh session.

    Returns a {position_key: occupant_id} dict for occupied slots only.
    """

    async def _read(triangle_id: int) -> dict[str, int]:
        async with session_maker() as check:
            result = await check.execute(
                select(TrianglePosition.position_key, TrianglePosition.occupant_id)
                .where(
                    TrianglePosition.triangle_id == triangle_id,
                    TrianglePosition.occupant_id.is_not(None),
                )
            )
            return {key: user_id for key, user_id in result.all()}

    return _read


@pytest.fixture
def read_triangle_ids(session_maker):
    """Read ids of all committed triangles, oldest first."""

    async def _read() -> list[int]:
        async with session_maker() as check:
            result = await check.execute(select(Triangle.id).order_by(Triangle.id))
            return list(result.scalars().all())

    return _read


@pytest.fixture
def count_positions(session_maker):
    """Count committed positions of a triangle."""

    async def _count(triangle_id: int) -> int:
        async with session_maker() as check:
            result = await check.execute(
                select(func.count())
                .select_from(TrianglePosition)
                .where(TrianglePosition.triangle_id == triangle_id)
            )
            return result.scalar()

    return _count


@pytest.fixture
def fill_triangle(service, make_users):
    """
    Create 15 users and place them in order.

    Returns the user ids; the first placed user takes the top slot.
    """

    async def _fill(plan: str = "BASIC") -> list[int]:
        users = await make_users(15, plan=plan)
        user_ids = [user.id for user in users]
        for user_id in user_ids:
            await service.assign(user_id)
        return user_ids

    return _fill

"""
Integration tests for user placement.

Tests cover:
- Canonical fill order
- Triangle selection (referrer, oldest open, new)
- Plan isolation
- Failure handling
"""

import pytest

from app.config.triangle_structure import POSITION_KEYS
from app.repositories.triangle_position_repository import (
    TrianglePositionRepository,
)
from app.utils.exceptions import NotFoundError


class TestFillOrder:
    """Test slot order inside one triangle."""

    @pytest.mark.asyncio
    async def test_first_user_creates_triangle(
        self, service, make_user, read_triangle_ids, count_positions
    ):
        """First placement creates a triangle with all 15 slots."""
        user = await make_user()

        position = await service.assign(user.id)

        assert position.position_key == "A"
        triangle_ids = await read_triangle_ids()
        assert triangle_ids == [position.triangle_id]
        assert await count_positions(position.triangle_id) == 15

    @pytest.mark.asyncio
    async def test_slots_filled_in_canonical_order(
        self, service, make_users, read_occupants
    ):
        """Slots fill level by level, left to right."""
        users = await make_users(14)
        user_ids = [user.id for user in users]

        keys = []
        for user_id in user_ids:
            position = await service.assign(user_id)
            keys.append(position.position_key)

        assert keys == list(POSITION_KEYS[:14])
        occupants = await read_occupants(position.triangle_id)
        assert occupants == dict(zip(POSITION_KEYS[:14], user_ids))

    @pytest.mark.asyncio
    async def test_partial_triangle_is_not_complete(
        self, service, make_users
    ):
        users = await make_users(14)
        for user in users:
            position = await service.assign(user.id)

        triangle = await service.triangle_repo.get_by_id(position.triangle_id)
        assert triangle.is_complete is False
        assert triangle.completed_at is None


class TestTriangleSelection:
    """Test which triangle receives a new user."""

    @pytest.fixture
    async def two_triangles(self, service):
        """Two empty BASIC triangles, oldest first."""
        older = await service.create_triangle("BASIC")
        newer = await service.create_triangle("BASIC")
        return older.id, newer.id

    @pytest.fixture
    async def referrer_in_newer(self, session, make_user, two_triangles):
        """Referrer sitting on top of the newer triangle."""
        referrer = await make_user()
        await TrianglePositionRepository(session).set_occupant_by_key(
            two_triangles[1], "A", referrer.id
        )
        await session.commit()
        return referrer.id

    @pytest.mark.asyncio
    async def test_no_referrer_uses_oldest_open(
        self, service, make_user, two_triangles
    ):
        user = await make_user()

        position = await service.assign(user.id)

        assert position.triangle_id == two_triangles[0]
        assert position.position_key == "A"

    @pytest.mark.asyncio
    async def test_upline_triangle_preferred(
        self, service, make_user, two_triangles, referrer_in_newer
    ):
        """Upline's triangle wins over the oldest open one."""
        user = await make_user(upline_id=referrer_in_newer)

        position = await service.assign(user.id)

        assert position.triangle_id == two_triangles[1]
        assert position.position_key == "AB1"

    @pytest.mark.asyncio
    async def test_explicit_referrer_overrides_upline(
        self, service, make_user, two_triangles, referrer_in_newer
    ):
        unplaced = await make_user()
        user = await make_user(upline_id=unplaced.id)

        position = await service.assign(user.id, referrer_id=referrer_in_newer)

        assert position.triangle_id == two_triangles[1]

    @pytest.mark.asyncio
    async def test_unplaced_referrer_falls_back(
        self, service, make_user, two_triangles
    ):
        """Referrer without a position does not block placement."""
        referrer = await make_user()
        user = await make_user(upline_id=referrer.id)

        position = await service.assign(user.id)

        assert position.triangle_id == two_triangles[0]

    @pytest.mark.asyncio
    async def test_referrer_on_other_plan_falls_back(
        self, service, make_user, two_triangles
    ):
        """Referrer's triangle of another plan is never used."""
        referrer = await make_user(plan="PREMIUM")
        premium = await service.assign(referrer.id)
        user = await make_user(upline_id=referrer.id)

        position = await service.assign(user.id)

        assert position.triangle_id == two_triangles[0]
        assert position.triangle_id != premium.triangle_id

    @pytest.mark.asyncio
    async def test_token_referrer(
        self, service, session, make_user, two_triangles
    ):
        """Token from the signup link picks the referrer's triangle."""
        referrer = await make_user(username="alice")
        await TrianglePositionRepository(session).set_occupant_by_key(
            two_triangles[1], "A", referrer.id
        )
        await session.commit()
        user = await make_user()

        position = await service.assign_by_token(user.id, "alice")

        assert position.triangle_id == two_triangles[1]

    @pytest.mark.asyncio
    async def test_unresolved_token_uses_upline(
        self, service, make_user, two_triangles, referrer_in_newer
    ):
        user = await make_user(upline_id=referrer_in_newer)

        position = await service.assign_by_token(user.id, "nobody")

        assert position.triangle_id == two_triangles[1]


class TestPlanIsolation:
    """Test that plans never share triangles."""

    @pytest.mark.asyncio
    async def test_plans_use_separate_triangles(
        self, service, make_user, read_triangle_ids
    ):
        basic = await make_user(plan="BASIC")
        premium = await make_user(plan="PREMIUM")

        basic_position = await service.assign(basic.id)
        premium_position = await service.assign(premium.id)

        assert basic_position.triangle_id != premium_position.triangle_id
        assert premium_position.position_key == "A"
        assert len(await read_triangle_ids()) == 2


class TestPlacementErrors:
    """Test placement failures."""

    @pytest.mark.asyncio
    async def test_unknown_user(self, service, read_triangle_ids):
        with pytest.raises(NotFoundError):
            await service.assign(999)

        assert await read_triangle_ids() == []

    @pytest.mark.asyncio
    async def test_session_usable_after_failure(self, service, make_user):
        """Failed placement is rolled back and the service keeps working."""
        user = await make_user()
        user_id = user.id

        with pytest.raises(NotFoundError):
            await service.assign(999)

        position = await service.assign(user_id)
        assert position.position_key == "A"

"""
Integration tests for referral token resolution.

Users are created with explicit ids so that suffix matches are predictable.
"""

import pytest

from app.repositories.user_repository import UserRepository
from app.services.triangle import ReferrerResolver


@pytest.fixture
def resolver(session):
    """Resolver with the default suffix threshold."""
    return ReferrerResolver(session, suffix_min_length=3)


class TestResolutionOrder:
    """Test strategy priority."""

    @pytest.mark.asyncio
    async def test_exact_id(self, resolver, make_user):
        user = await make_user(id=98765)

        assert (await resolver.resolve("98765")).id == user.id

    @pytest.mark.asyncio
    async def test_id_beats_username(self, resolver, make_user):
        await make_user(id=11111, username="98765")
        await make_user(id=98765)

        assert (await resolver.resolve("98765")).id == 98765

    @pytest.mark.asyncio
    async def test_numeric_username_when_id_missing(self, resolver, make_user):
        await make_user(id=5, username="424242")

        assert (await resolver.resolve("424242")).id == 5

    @pytest.mark.asyncio
    async def test_zero_padded_token_is_a_username(self, resolver, make_user):
        """Leading zeros are not an id: username "007" beats user 7."""
        await make_user(id=7)
        await make_user(id=20, username="007")

        assert (await resolver.resolve("007")).id == 20

    @pytest.mark.asyncio
    async def test_id_beats_referral_code(self, resolver, make_user):
        await make_user(id=11111, referral_code="98765")
        await make_user(id=98765)

        assert (await resolver.resolve("98765")).id == 98765

    @pytest.mark.asyncio
    async def test_username_beats_referral_code(self, resolver, make_user):
        await make_user(id=22222, username="promo")
        await make_user(id=33333, referral_code="promo")

        assert (await resolver.resolve("promo")).id == 22222

    @pytest.mark.asyncio
    async def test_referral_code(self, resolver, make_user):
        await make_user(id=44444, referral_code="REF1")

        assert (await resolver.resolve("REF1")).id == 44444

    @pytest.mark.asyncio
    async def test_surrounding_whitespace_ignored(self, resolver, make_user):
        await make_user(id=55555, username="alice")

        assert (await resolver.resolve("  alice ")).id == 55555


class TestSuffixFallback:
    """Test id suffix matching."""

    @pytest.mark.asyncio
    async def test_suffix_match(self, resolver, make_user):
        await make_user(id=98765)

        assert (await resolver.resolve("765")).id == 98765

    @pytest.mark.asyncio
    async def test_referral_code_beats_suffix(self, resolver, make_user):
        await make_user(id=98765)
        await make_user(id=12340, referral_code="765")

        assert (await resolver.resolve("765")).id == 12340

    @pytest.mark.asyncio
    async def test_oldest_match_wins(self, resolver, make_user):
        await make_user(id=98765)
        await make_user(id=10765)

        assert (await resolver.resolve("765")).id == 10765

    @pytest.mark.asyncio
    async def test_short_token_not_scanned(self, resolver, make_user):
        await make_user(id=98765)

        assert await resolver.resolve("65") is None

    @pytest.mark.asyncio
    async def test_custom_threshold(self, session, make_user):
        await make_user(id=98765)
        resolver = ReferrerResolver(session, suffix_min_length=2)

        assert (await resolver.resolve("65")).id == 98765

    @pytest.mark.asyncio
    async def test_scan_crosses_batches(self, session, make_user):
        for user_id in (101, 202, 303, 404, 98765):
            await make_user(id=user_id)

        user = await UserRepository(session).find_by_id_suffix(
            "765", batch_size=2
        )

        assert user.id == 98765


class TestUnresolved:
    """Test tokens that match nobody."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "   "])
    async def test_empty_token(self, resolver, token):
        assert await resolver.resolve(token) is None

    @pytest.mark.asyncio
    async def test_unknown_token(self, resolver, make_user):
        await make_user(id=98765, username="alice")

        assert await resolver.resolve("nobody") is None

"""
Tests for the triangle shape definition.

Covers:
- Slot count, level sizes and keys
- Canonical fill order
- Promotion maps
"""

import pytest

from app.config.triangle_structure import (
    LEFT_BRANCH_KEY,
    LEFT_PROMOTION_MAP,
    LEVEL_SIZES,
    POSITION_KEYS,
    RIGHT_BRANCH_KEY,
    RIGHT_PROMOTION_MAP,
    TOP_POSITION_KEY,
    TRIANGLE_SIZE,
    TRIANGLE_STRUCTURE,
    get_slot,
)


class TestTriangleShape:
    """Test the static 15-slot shape."""

    def test_has_fifteen_slots(self):
        assert TRIANGLE_SIZE == 15
        assert len(POSITION_KEYS) == 15

    def test_level_sizes(self):
        for level, size in LEVEL_SIZES.items():
            slots = [s for s in TRIANGLE_STRUCTURE if s.level == level]
            assert len(slots) == size
            assert [s.index for s in slots] == list(range(size))

    def test_fill_order_is_level_then_index(self):
        pairs = [(s.level, s.index) for s in TRIANGLE_STRUCTURE]
        assert pairs == sorted(pairs)

    def test_canonical_keys(self):
        assert [s.key for s in TRIANGLE_STRUCTURE] == [
            "A",
            "AB1", "AB2",
            "B1C1", "B1C2", "B2C1", "B2C2",
            "C1D1", "C1D2", "C2D1", "C2D2", "C3D1", "C3D2", "C4D1", "C4D2",
        ]

    def test_named_keys(self):
        assert get_slot(TOP_POSITION_KEY) == (1, 0, "A")
        assert get_slot(LEFT_BRANCH_KEY) == (2, 0, "AB1")
        assert get_slot(RIGHT_BRANCH_KEY) == (2, 1, "AB2")

    def test_unknown_key_raises(self):
        with pytest.raises(KeyError):
            get_slot("Z9")


class TestPromotionMaps:
    """Test the fixed promotion maps used by cycling."""

    def test_left_map_exact(self):
        assert LEFT_PROMOTION_MAP == {
            "B1C1": "AB1",
            "B1C2": "AB2",
            "C1D1": "B1C1",
            "C1D2": "B1C2",
            "C2D1": "B2C1",
            "C2D2": "B2C2",
        }

    def test_right_map_exact(self):
        assert RIGHT_PROMOTION_MAP == {
            "B2C1": "AB1",
            "B2C2": "AB2",
            "C3D1": "B1C1",
            "C3D2": "B1C2",
            "C4D1": "B2C1",
            "C4D2": "B2C2",
        }

    @pytest.mark.parametrize("promotion_map", [LEFT_PROMOTION_MAP, RIGHT_PROMOTION_MAP])
    def test_every_move_is_one_level_up(self, promotion_map):
        for old_key, new_key in promotion_map.items():
            assert get_slot(new_key).level == get_slot(old_key).level - 1

    def test_maps_are_disjoint(self):
        assert not set(LEFT_PROMOTION_MAP) & set(RIGHT_PROMOTION_MAP)

    def test_only_top_and_branch_heads_are_not_promoted(self):
        promoted = set(LEFT_PROMOTION_MAP) | set(RIGHT_PROMOTION_MAP)
        assert set(POSITION_KEYS) - promoted == {
            TOP_POSITION_KEY, LEFT_BRANCH_KEY, RIGHT_BRANCH_KEY
        }

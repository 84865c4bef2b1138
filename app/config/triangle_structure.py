"""
Single source of truth for the triangle shape.

A triangle has 15 slots on 4 levels (1, 2, 4 and 8 slots). Every slot has a
fixed key. Slots are created and filled in ascending (level, index) order.
"""

from typing import NamedTuple


class SlotDefinition(NamedTuple):
    """One slot of the triangle shape."""

    level: int  # 1 (top) .. 4 (bottom)
    index: int  # 0-based, left to right within the level
    key: str


# Canonical fill order: top first, then left to right within each level
TRIANGLE_STRUCTURE: tuple[SlotDefinition, ...] = (
    # Level 1
    SlotDefinition(1, 0, "A"),
    # Level 2
    SlotDefinition(2, 0, "AB1"),
    SlotDefinition(2, 1, "AB2"),
    # Level 3
    SlotDefinition(3, 0, "B1C1"),
    SlotDefinition(3, 1, "B1C2"),
    SlotDefinition(3, 2, "B2C1"),
    SlotDefinition(3, 3, "B2C2"),
    # Level 4
    SlotDefinition(4, 0, "C1D1"),
    SlotDefinition(4, 1, "C1D2"),
    SlotDefinition(4, 2, "C2D1"),
    SlotDefinition(4, 3, "C2D2"),
    SlotDefinition(4, 4, "C3D1"),
    SlotDefinition(4, 5, "C3D2"),
    SlotDefinition(4, 6, "C4D1"),
    SlotDefinition(4, 7, "C4D2"),
)

TRIANGLE_SIZE = len(TRIANGLE_STRUCTURE)
LEVEL_SIZES: dict[int, int] = {1: 1, 2: 2, 3: 4, 4: 8}

TOP_POSITION_KEY = "A"
LEFT_BRANCH_KEY = "AB1"
RIGHT_BRANCH_KEY = "AB2"

POSITION_KEYS: tuple[str, ...] = tuple(slot.key for slot in TRIANGLE_STRUCTURE)

# Promotion maps used when a completed triangle splits.
# Each occupant moves exactly one level up inside the successor built
# from its half of the old triangle.
LEFT_PROMOTION_MAP: dict[str, str] = {
    "B1C1": "AB1",
    "B1C2": "AB2",
    "C1D1": "B1C1",
    "C1D2": "B1C2",
    "C2D1": "B2C1",
    "C2D2": "B2C2",
}

RIGHT_PROMOTION_MAP: dict[str, str] = {
    "B2C1": "AB1",
    "B2C2": "AB2",
    "C3D1": "B1C1",
    "C3D2": "B1C2",
    "C4D1": "B2C1",
    "C4D2": "B2C2",
}

_SLOTS_BY_KEY: dict[str, SlotDefinition] = {
    slot.key: slot for slot in TRIANGLE_STRUCTURE
}


def get_slot(key: str) -> SlotDefinition:
    """
    Get slot definition by key.

    Args:
        key: Position key (e.g. "AB1")

    Returns:
        Slot definition

    Raises:
        KeyError: If key is not part of the triangle shape
    """
    return _SLOTS_BY_KEY[key]

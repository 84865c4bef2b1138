"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Mock database session
- Mock triangle and position objects
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.config.triangle_structure import TRIANGLE_STRUCTURE


@pytest.fixture
def mock_session():
    """
    Mock async database session.

    Returns:
        AsyncMock: Mocked async session for database operations
    """
    session = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


@pytest.fixture
def mock_triangle():
    """
    Create mock triangle object with default values.

    Default values:
    - id: 7
    - plan_type: BASIC
    - is_complete: False

    Returns:
        MagicMock: Mock triangle object
    """
    triangle = MagicMock()
    triangle.id = 7
    triangle.plan_type = "BASIC"
    triangle.is_complete = False
    triangle.payout_processed = False
    return triangle


@pytest.fixture
def make_positions():
    """
    Factory of mock positions for a triangle.

    Usage:
        make_positions({"A": 1, "AB1": 2})  # other slots empty
    """

    def _make_positions(occupants: dict[str, int], triangle_id: int = 7):
        positions = []
        for number, slot in enumerate(TRIANGLE_STRUCTURE, start=1):
            position = MagicMock()
            position.id = number
            position.triangle_id = triangle_id
            position.level = slot.level
            position.index = slot.index
            position.position_key = slot.key
            position.occupant_id = occupants.get(slot.key)
            positions.append(position)
        return positions

    return _make_positions

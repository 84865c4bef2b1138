"""
Exception types for the triangle engine.

Placement anomalies are hard failures; payout anomalies are not
represented here because they are logged and skipped.
"""


class TriangleEngineError(Exception):
    """Base class for engine errors."""
    pass


class NotFoundError(TriangleEngineError):
    """Raised when a required user, triangle or plan does not exist."""

    def __init__(self, entity: str, key: object) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class NoAvailablePositionError(TriangleEngineError):
    """Raised when a triangle reported as open has no empty slot."""

    def __init__(self, triangle_id: int) -> None:
        self.triangle_id = triangle_id
        super().__init__(f"No available positions in triangle {triangle_id}")


class PlacementConflictError(TriangleEngineError):
    """Raised when every slot claim lost a concurrent race."""

    def __init__(self, user_id: int, attempts: int) -> None:
        self.user_id = user_id
        self.attempts = attempts
        super().__init__(
            f"Could not place user {user_id} after {attempts} attempts"
        )

"""
Triangle lifecycle engine.

Contains the components of the triangle lifecycle:
- referrer_resolver: Resolves referral tokens to users
- placement_engine: Places users into triangle slots
- completion_handler: Marks full triangles complete
- payout_processor: Pays the top occupant of a completed triangle
- cycling_engine: Splits completed triangles into successors
"""

from app.services.triangle.completion_handler import (
    CompletionHandler,
    CompletionResult,
)
from app.services.triangle.cycling_engine import CycleResult, CyclingEngine
from app.services.triangle.payout_processor import PayoutProcessor
from app.services.triangle.placement_engine import PlacementEngine
from app.services.triangle.referrer_resolver import (
    ReferrerResolver,
    is_valid_user_id,
)


__all__ = [
    # Placement
    "PlacementEngine",
    "ReferrerResolver",
    "is_valid_user_id",
    # Completion
    "CompletionHandler",
    "CompletionResult",
    "PayoutProcessor",
    # Cycling
    "CyclingEngine",
    "CycleResult",
]

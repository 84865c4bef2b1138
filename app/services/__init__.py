"""
Services.

Business logic layer.
"""

from app.services.base_service import BaseService, transaction
from app.services.triangle_service import TriangleInfo, TriangleService


__all__ = [
    # Base
    "BaseService",
    "transaction",
    # Triangle engine
    "TriangleService",
    "TriangleInfo",
]

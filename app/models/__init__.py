"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.base import Base
from app.models.enums import TransactionStatus, TransactionType
from app.models.plan import Plan
from app.models.transaction import Transaction
from app.models.triangle import Triangle, TrianglePosition

# Core Models
from app.models.user import User


__all__ = [
    "Base",
    "Plan",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "Triangle",
    "TrianglePosition",
    "User",
]

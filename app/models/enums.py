"""
Enumerations shared by models.
"""

from enum import StrEnum


class TransactionType(StrEnum):
    """Transaction type."""

    WITHDRAWAL = "withdrawal"


class TransactionStatus(StrEnum):
    """Transaction status."""

    PENDING = "pending"

"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

import secrets
from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def withdrawal_reference(now: datetime | None = None) -> str:
    """
    Build external reference for a withdrawal transaction.

    Millisecond timestamp plus a random suffix so that payouts created
    within the same millisecond stay unique.

    Args:
        now: Reference time (defaults to current UTC time)

    Returns:
        Reference such as "WD1760870400000a1b2c3d4"
    """
    moment = now or utc_now()
    return f"WD{int(moment.timestamp() * 1000)}{secrets.token_hex(4)}"

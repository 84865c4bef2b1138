"""
Typed query filters.

Each filter is a frozen dataclass with a closed set of fields for one
entity. Unset fields (None) do not constrain the query.
"""

from dataclasses import dataclass, fields
from typing import Any

from sqlalchemy import ColumnElement, exists, select

from app.models.enums import TransactionStatus, TransactionType
from app.models.transaction import Transaction
from app.models.triangle import Triangle, TrianglePosition
from app.models.user import User


class QueryFilter:
    """Base class: equality on every set field."""

    model: Any = None

    def clauses(self) -> list[ColumnElement[bool]]:
        """
        Compile filter into SQLAlchemy WHERE clauses.

        Returns:
            List of boolean clauses (empty when nothing is set)
        """
        result = []
        for field in fields(self):  # type: ignore[arg-type]
            value = getattr(self, field.name)
            if value is None:
                continue
            result.append(getattr(self.model, field.name) == value)
        return result

    def is_empty(self) -> bool:
        """Check if no field is set."""
        return not self.clauses()


@dataclass(frozen=True)
class UserFilter(QueryFilter):
    """Filter on users."""

    model = User

    id: int | None = None
    username: str | None = None
    referral_code: str | None = None
    plan: str | None = None
    upline_id: int | None = None


@dataclass(frozen=True)
class TriangleFilter(QueryFilter):
    """
    Filter on triangles.

    has_open_slot adds an EXISTS sub-query on empty positions.
    """

    model = Triangle

    id: int | None = None
    plan_type: str | None = None
    is_complete: bool | None = None
    has_open_slot: bool | None = None

    def clauses(self) -> list[ColumnElement[bool]]:
        result = []
        if self.id is not None:
            result.append(Triangle.id == self.id)
        if self.plan_type is not None:
            result.append(Triangle.plan_type == self.plan_type)
        if self.is_complete is not None:
            result.append(Triangle.is_complete == self.is_complete)
        if self.has_open_slot is not None:
            open_slot = exists(
                select(TrianglePosition.id).where(
                    TrianglePosition.triangle_id == Triangle.id,
                    TrianglePosition.occupant_id.is_(None),
                )
            )
            result.append(open_slot if self.has_open_slot else ~open_slot)
        return result


@dataclass(frozen=True)
class PositionFilter(QueryFilter):
    """
    Filter on triangle positions.

    is_open selects empty (True) or occupied (False) slots.
    """

    model = TrianglePosition

    triangle_id: int | None = None
    occupant_id: int | None = None
    level: int | None = None
    index: int | None = None
    position_key: str | None = None
    is_open: bool | None = None

    def clauses(self) -> list[ColumnElement[bool]]:
        result = []
        if self.triangle_id is not None:
            result.append(TrianglePosition.triangle_id == self.triangle_id)
        if self.occupant_id is not None:
            result.append(TrianglePosition.occupant_id == self.occupant_id)
        if self.level is not None:
            result.append(TrianglePosition.level == self.level)
        if self.index is not None:
            result.append(TrianglePosition.index == self.index)
        if self.position_key is not None:
            result.append(TrianglePosition.position_key == self.position_key)
        if self.is_open is not None:
            column = TrianglePosition.occupant_id
            result.append(column.is_(None) if self.is_open else column.is_not(None))
        return result


@dataclass(frozen=True)
class TransactionFilter(QueryFilter):
    """Filter on transactions."""

    model = Transaction

    user_id: int | None = None
    type: TransactionType | None = None
    status: TransactionStatus | None = None

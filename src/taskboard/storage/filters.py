"""Composable SQL predicates for task search.

A :class:`Predicate` is an immutable ``(sql, params)`` fragment. The task
builder folds one optional criterion per filter field into a single
predicate, starting from :meth:`Predicate.true` so that an empty filter
matches every row.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from taskboard.models import TaskPriority, TaskSearchFilter, TaskStatus
from taskboard.utils.timestamps import to_db


@dataclass(frozen=True)
class Predicate:
    sql: str
    params: tuple[Any, ...] = field(default=())

    @classmethod
    def true(cls) -> "Predicate":
        return cls("1 = 1")

    @property
    def is_true(self) -> bool:
        return self.sql == "1 = 1"

    def and_(self, other: "Predicate") -> "Predicate":
        if self.is_true:
            return other
        if other.is_true:
            return self
        return Predicate(f"({self.sql}) AND ({other.sql})", self.params + other.params)

    def or_(self, other: "Predicate") -> "Predicate":
        if self.is_true or other.is_true:
            return Predicate.true()
        return Predicate(f"({self.sql}) OR ({other.sql})", self.params + other.params)


def equals(column: str, value: Any) -> Predicate:
    return Predicate(f"{column} = ?", (value,))


def contains(column: str, value: str) -> Predicate:
    """Case-sensitive substring match; the value is taken literally."""
    return Predicate(f"instr({column}, ?) > 0", (value,))


def at_least(column: str, value: datetime) -> Predicate:
    return Predicate(f"{column} >= ?", (to_db(value),))


def at_most(column: str, value: datetime) -> Predicate:
    return Predicate(f"{column} <= ?", (to_db(value),))


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _name(value: str) -> Predicate:
    return equals("name", value).or_(contains("name", value))


def _enum_value(column: str, enum_cls: type[Enum]) -> Callable[[str], Predicate]:
    # unknown values are ignored rather than rejected
    def build(value: str) -> Predicate:
        try:
            member = enum_cls(value.strip().upper())
        except ValueError:
            return Predicate.true()
        return equals(column, member.value)

    return build


def _uuid(column: str) -> Callable[[UUID], Predicate]:
    return lambda value: equals(column, str(value))


def _timestamp(column: str, build: Callable[[str, datetime], Predicate]) -> Callable[[datetime], Predicate]:
    return lambda value: build(column, value)


def _exact_timestamp(column: str, value: datetime) -> Predicate:
    return equals(column, to_db(value))


_CRITERIA: dict[str, Callable[[Any], Predicate]] = {
    "id": _uuid("id"),
    "name": _name,
    "description": lambda value: equals("description", value),
    "status": _enum_value("status", TaskStatus),
    "priority": _enum_value("priority", TaskPriority),
    "creator_id": _uuid("creator_id"),
    "executor_id": _uuid("executor_id"),
    "created_at": _timestamp("created_at", _exact_timestamp),
    "created_at_after": _timestamp("created_at", at_least),
    "created_at_before": _timestamp("created_at", at_most),
    "expires_on": _timestamp("expires_on", _exact_timestamp),
    "expires_on_after": _timestamp("expires_on", at_least),
    "expires_on_before": _timestamp("expires_on", at_most),
    "updated_at": _timestamp("updated_at", _exact_timestamp),
    "updated_at_after": _timestamp("updated_at", at_least),
    "updated_at_before": _timestamp("updated_at", at_most),
}


def build_task_predicate(search: TaskSearchFilter | None) -> Predicate:
    """Combine every present criterion of ``search`` with AND.

    Args:
        search: Filter values; None or an empty filter matches all tasks

    Returns:
        Predicate suitable for a ``WHERE`` clause
    """
    predicate = Predicate.true()
    if search is None:
        return predicate

    for field_name, build in _CRITERIA.items():
        value = getattr(search, field_name)
        if _present(value):
            predicate = predicate.and_(build(value))
    return predicate

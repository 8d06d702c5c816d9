"""Partial-update reconciliation of stored records."""

from collections.abc import Iterable
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel

from taskboard.models import BaseRecord
from taskboard.utils.timestamps import ensure_utc, later_than

RecordT = TypeVar("RecordT", bound=BaseRecord)


def is_present(value: Any) -> bool:
    """Whether a request value should be applied (not None, not blank)."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _normalize(value: Any) -> Any:
    if isinstance(value, datetime):
        return ensure_utc(value)
    return value


def reconcile(
    request: BaseModel,
    record: RecordT,
    fields: Iterable[str],
    now: datetime | None = None,
) -> tuple[RecordT, list[str]]:
    """Copy changed fields from a partial-update request onto a record.

    A field is overwritten only when the request carries a present value
    that differs from the stored one. If anything changed, ``updated_at``
    is stamped strictly later than its previous value.

    Args:
        request: Update payload; absent or blank fields are ignored
        record: Stored record (not modified)
        fields: Names shared by ``request`` and ``record`` to consider
        now: Override for the current time

    Returns:
        Tuple of (record, changed field names). When nothing changed the
        original record is returned as-is.
    """
    changes: dict[str, Any] = {}
    for name in fields:
        value = _normalize(getattr(request, name))
        if is_present(value) and value != getattr(record, name):
            changes[name] = value

    if not changes:
        return record, []

    changes["updated_at"] = later_than(record.updated_at, now)
    updated = type(record).model_validate(record.model_dump() | changes)
    return updated, [name for name in changes if name != "updated_at"]

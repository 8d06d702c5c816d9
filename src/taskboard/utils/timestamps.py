"""UTC timestamp helpers shared by storage and the HTTP layer."""

from datetime import datetime, timedelta, timezone

# Parsing format for stored values; writing zero-pads the year to four digits
# so every value has the same width and SQLite range comparisons are lexicographic
DB_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
DB_TIME_FORMAT = "%m-%d %H:%M:%S.%f"

RESPONSE_TIME_FORMAT = "%m/%d %H:%M:%S"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    Naive datetimes are interpreted as UTC.

    Raises:
        OverflowError: If the UTC equivalent falls outside years 1-9999
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_db(value: datetime | None) -> str | None:
    """Serialize a datetime for storage.

    Args:
        value: Datetime (aware or naive UTC), or None

    Returns:
        Fixed-width UTC string, or None
    """
    if value is None:
        return None
    value = ensure_utc(value)
    return f"{value.year:04d}-{value.strftime(DB_TIME_FORMAT)}"


def from_db(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.strptime(value, DB_FORMAT).replace(tzinfo=timezone.utc)


def later_than(previous: datetime | None, now: datetime | None = None) -> datetime:
    """Return the current time, forced strictly after ``previous``.

    Args:
        previous: Timestamp the result must exceed (ignored when None)
        now: Override for the current time

    Returns:
        Aware UTC datetime greater than ``previous``
    """
    current = ensure_utc(now or utc_now())
    if previous is not None and current <= ensure_utc(previous):
        current = ensure_utc(previous) + timedelta(microseconds=1)
    return current


def format_response_timestamp(value: datetime | None) -> str | None:
    """Format a timestamp the way response bodies carry it (yyyy/MM/dd HH:mm:ss)."""
    if value is None:
        return None
    value = ensure_utc(value)
    return f"{value.year:04d}/{value.strftime(RESPONSE_TIME_FORMAT)}"

"""Shared utilities."""

from taskboard.utils.logging import get_logger, sanitize_for_logging, setup_logging
from taskboard.utils.metrics import get_metrics
from taskboard.utils.timestamps import format_response_timestamp, from_db, to_db, utc_now

__all__ = [
    "get_logger",
    "sanitize_for_logging",
    "setup_logging",
    "get_metrics",
    "format_response_timestamp",
    "from_db",
    "to_db",
    "utc_now",
]

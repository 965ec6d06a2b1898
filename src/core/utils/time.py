"""
Time-related utilities for the application.

Image timestamps are stored as whole seconds since the Unix epoch so that
range predicates in the metadata store compare numerically.
"""

from datetime import datetime, timezone


def utc_now_epoch() -> int:
    """Return the current UTC time as whole seconds since the epoch."""
    return int(datetime.now(timezone.utc).timestamp())


def format_timestamp(timestamp: int, date_format: str) -> str:
    """Render an epoch timestamp with a strftime pattern.

    Example:
        format_timestamp(0, "%Y-%m-%d") -> "1970-01-01"
    """
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(date_format)

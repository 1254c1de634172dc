"""Datetime helpers for the API layer.

All timestamps stored and returned by the API are timezone-aware UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Get the current time in UTC, timezone-aware."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

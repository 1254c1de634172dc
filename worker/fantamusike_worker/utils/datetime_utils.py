"""
Low-level timezone and timestamp utilities.

now_utc/ensure_utc are duplicated in api/app/utils/datetime_utils.py because
api/ and worker/ deploy as independent services.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def now_utc() -> datetime:
    """Return the current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def today_utc() -> date:
    """Return the current date in UTC timezone."""
    return now_utc().date()


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_release_date(value: str | None) -> datetime | None:
    """Parse a Spotify ``release_date`` into UTC midnight of its first day.

    Spotify reports dates with year, month or day precision
    (``"2024"``, ``"2024-05"``, ``"2024-05-10"``); missing parts default to 1.
    Returns None for empty or malformed values.
    """
    if not value:
        return None
    parts = value.strip().split("-")
    if not 1 <= len(parts) <= 3:
        return None
    try:
        numbers = [int(part) for part in parts]
        year, month, day = (numbers + [1, 1])[:3]
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None

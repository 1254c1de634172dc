"""Tests for Spotify release date parsing."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fantamusike_worker.utils.datetime_utils import ensure_utc, parse_release_date


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2026-10-13", datetime(2026, 10, 13, tzinfo=timezone.utc)),
        ("2026-10", datetime(2026, 10, 1, tzinfo=timezone.utc)),
        ("2026", datetime(2026, 1, 1, tzinfo=timezone.utc)),
    ],
)
def test_precisions(value: str, expected: datetime) -> None:
    assert parse_release_date(value) == expected


@pytest.mark.parametrize("value", [None, "", "soon", "2026-13-01", "2026-10-13-01"])
def test_invalid(value) -> None:
    assert parse_release_date(value) is None


def test_ensure_utc_naive() -> None:
    assert ensure_utc(datetime(2026, 1, 1)).tzinfo is timezone.utc

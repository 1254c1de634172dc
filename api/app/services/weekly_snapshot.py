"""Weekly popularity/follower snapshots for the active season.

Each run computes the season's current week and copies the artist cache into
``weekly_snapshots`` for every artist that has no row for that season week
yet. The snapshot is the baseline daily scoring measures growth against.

Week numbering is 1-based and derived from elapsed time only:

    week_number = max(1, ceil((now - season.start_date) / 7 days))

so a run on the start date (or slightly before it) is week 1, and a run
7 days + 1 minute after the start is week 2.

The read-check-insert sequence is not atomic. Duplicate rows for the
same ``(season_id, week_number, artist_id)`` are prevented by the table's
unique constraint; the insert skips conflicting rows instead of failing the
whole batch.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.game import ArtistCache, Season, WeeklySnapshot
from ..utils.datetime_utils import ensure_utc, now_utc

logger = logging.getLogger(__name__)

WEEK = timedelta(days=7)


@dataclass(frozen=True)
class SnapshotOutcome:
    """Result of one snapshot run, rendered as the trigger's JSON body."""

    message: str
    week_number: int | None = None
    created: int = 0

    def to_payload(self) -> dict[str, object]:
        if self.created:
            return {"success": True, "message": self.message}
        return {"message": self.message}


def compute_week_number(start_date: datetime, now: datetime) -> int:
    """Return the 1-based season week that ``now`` falls in."""
    elapsed = ensure_utc(now) - ensure_utc(start_date)
    return max(1, math.ceil(elapsed / WEEK))


async def get_active_season(session: AsyncSession) -> Season | None:
    """Return the season flagged active, or None.

    More than one active season is a data error this job does not resolve; the
    most recently started one is used and the condition is logged.
    """
    result = await session.execute(
        select(Season).where(Season.is_active.is_(True)).order_by(Season.start_date.desc())
    )
    seasons = list(result.scalars().all())
    if len(seasons) > 1:
        logger.warning(
            "Multiple active seasons found",
            extra={"season_ids": [str(season.id) for season in seasons]},
        )
    return seasons[0] if seasons else None


async def run_weekly_snapshot(
    session: AsyncSession,
    now: datetime | None = None,
) -> SnapshotOutcome:
    """Snapshot every cached artist not yet captured for the current week.

    Backend errors propagate to the caller unchanged; nothing is retried and
    the insert is a single statement, so a failure leaves no partial batch.
    """
    season = await get_active_season(session)
    if season is None:
        logger.info("No active season, skipping weekly snapshot")
        return SnapshotOutcome(message="No active season found. Skipping snapshot.")

    week_number = compute_week_number(season.start_date, now or now_utc())
    logger.info(
        "Performing weekly snapshot",
        extra={"season_id": str(season.id), "week_number": week_number},
    )

    artists_result = await session.execute(
        select(
            ArtistCache.spotify_id,
            ArtistCache.current_popularity,
            ArtistCache.current_followers,
        )
    )
    artists = artists_result.all()
    if not artists:
        return SnapshotOutcome(
            message="No artists found in cache. Skipping snapshot.",
            week_number=week_number,
        )

    existing_result = await session.execute(
        select(WeeklySnapshot.artist_id).where(
            WeeklySnapshot.season_id == season.id,
            WeeklySnapshot.week_number == week_number,
        )
    )
    already_snapshotted = set(existing_result.scalars().all())

    rows = [
        {
            "season_id": season.id,
            "week_number": week_number,
            "artist_id": artist.spotify_id,
            "popularity": artist.current_popularity,
            "followers": artist.current_followers,
        }
        for artist in artists
        if artist.spotify_id not in already_snapshotted
    ]

    if not rows:
        return SnapshotOutcome(
            message=f"No new artists to snapshot for Week {week_number}.",
            week_number=week_number,
        )

    stmt = (
        pg_insert(WeeklySnapshot)
        .values(rows)
        .on_conflict_do_nothing(index_elements=["season_id", "week_number", "artist_id"])
    )
    await session.execute(stmt)
    await session.commit()

    logger.info(
        "Weekly snapshot created",
        extra={"week_number": week_number, "snapshots_created": len(rows)},
    )
    return SnapshotOutcome(
        message=f"Snapshot created for Week {week_number} ({len(rows)} new artists)",
        week_number=week_number,
        created=len(rows),
    )

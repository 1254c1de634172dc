"""Daily scoring run.

1. Refresh every snapshotted artist from Spotify and upsert its weekly score.
2. Resolve pending head-to-head bets against the refreshed scores.
3. Recompute each user's season total and log the points gained today.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Any

import httpx
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.orm import Session

from ..db import db_models
from ..logging import logger
from ..spotify.client import SpotifyAPIError, SpotifyClient
from ..utils.datetime_utils import now_utc, today_utc
from .artist_tiers import classify_artist_tier
from .scoring import calculate_artist_score, calculate_user_total, resolve_bet


def get_active_season(session: Session):
    """Most recently started active season, or None."""
    seasons = (
        session.query(db_models.Season)
        .filter(db_models.Season.is_active.is_(True))
        .order_by(db_models.Season.start_date.desc())
        .all()
    )
    if len(seasons) > 1:
        logger.warning("multiple_active_seasons", count=len(seasons), using=str(seasons[0].id))
    return seasons[0] if seasons else None


def get_latest_snapshot_week(session: Session, season_id=None) -> int | None:
    query = session.query(db_models.WeeklySnapshot.week_number)
    if season_id is not None:
        query = query.filter(db_models.WeeklySnapshot.season_id == season_id)
    return (
        query.order_by(db_models.WeeklySnapshot.week_number.desc())
        .limit(1)
        .scalar()
    )


def upsert_weekly_score(session: Session, week_number: int, artist_id: str, score) -> None:
    values = {
        "week_number": week_number,
        "artist_id": artist_id,
        "popularity_gain": score.popularity_gain,
        "follower_gain_percent": score.follower_gain_percent,
        "release_bonus": score.release_bonus,
        "total_points": score.total_points,
        "updated_at": now_utc(),
    }
    stmt = pg_insert(db_models.WeeklyScore).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["week_number", "artist_id"],
        set_={key: stmt.excluded[key] for key in values if key not in ("week_number", "artist_id")},
    )
    session.execute(stmt)


def update_artist_scores(
    session: Session,
    spotify: SpotifyClient,
    week_number: int,
    snapshots: list,
) -> int:
    """Score each snapshotted artist; artists Spotify cannot serve are skipped."""
    scored = 0
    for snapshot in snapshots:
        try:
            artist = spotify.get_artist(snapshot.artist_id)
        except (SpotifyAPIError, httpx.HTTPError) as exc:
            logger.warning(
                "artist_fetch_failed",
                artist_id=snapshot.artist_id,
                status=getattr(exc, "status_code", None),
                error=str(exc),
            )
            continue

        try:
            releases = spotify.get_artist_releases(snapshot.artist_id)
        except (SpotifyAPIError, httpx.HTTPError) as exc:
            logger.warning("artist_releases_failed", artist_id=snapshot.artist_id, error=str(exc))
            releases = []

        score = calculate_artist_score(
            snapshot_popularity=snapshot.popularity,
            snapshot_followers=snapshot.followers,
            current_popularity=artist.popularity,
            current_followers=artist.followers,
            releases=releases,
            since=snapshot.created_at,
        )

        session.query(db_models.ArtistCache).filter(
            db_models.ArtistCache.spotify_id == snapshot.artist_id
        ).update(
            {
                "current_popularity": artist.popularity,
                "current_followers": artist.followers,
                "last_updated": now_utc(),
            },
            synchronize_session=False,
        )
        upsert_weekly_score(session, week_number, snapshot.artist_id, score)
        scored += 1

        logger.debug(
            "artist_scored",
            artist_id=snapshot.artist_id,
            tier=classify_artist_tier(artist.popularity).value,
            hype=score.hype_points,
            fanbase=score.fanbase_points,
            release_bonus=score.release_bonus,
            total=score.total_points,
        )
    return scored


def resolve_pending_bets(session: Session, week_number: int) -> int:
    promos = (
        session.query(db_models.DailyPromo)
        .filter(
            db_models.DailyPromo.bet_done.is_(True),
            db_models.DailyPromo.bet_resolved.is_(False),
        )
        .all()
    )
    if not promos:
        return 0

    artist_ids: set[str] = set()
    for promo in promos:
        if promo.artist_id:
            artist_ids.add(promo.artist_id)
        rival = (promo.bet_snapshot or {}).get("rival") or {}
        if rival.get("id"):
            artist_ids.add(rival["id"])

    current_scores = dict(
        session.query(db_models.WeeklyScore.artist_id, db_models.WeeklyScore.total_points)
        .filter(
            db_models.WeeklyScore.week_number == week_number,
            db_models.WeeklyScore.artist_id.in_(artist_ids),
        )
        .all()
    )

    resolved = 0
    for promo in promos:
        try:
            outcome = resolve_bet(promo.artist_id, promo.bet_snapshot or {}, current_scores)
        except (KeyError, TypeError) as exc:
            logger.error("bet_resolution_failed", promo_id=promo.id, error=repr(exc))
            continue

        promo.bet_snapshot = outcome.apply_to(promo.bet_snapshot)
        promo.bet_resolved = True
        promo.total_points = (promo.total_points or 0) + outcome.points_awarded
        promo.total_coins = (promo.total_coins or 0) + outcome.coins_awarded

        if outcome.won:
            profile = session.get(db_models.Profile, promo.user_id)
            if profile is not None:
                profile.listen_score = (profile.listen_score or 0) + outcome.points_awarded
                profile.musi_coins = (profile.musi_coins or 0) + outcome.coins_awarded
        resolved += 1

    logger.info("bets_resolved", count=resolved, pending=len(promos))
    return resolved


def update_user_totals(session: Session, week_number: int, log_date: date | None = None) -> int:
    """Recompute season totals; returns how many users gained points."""
    scores_by_week: dict[int, dict[str, int]] = defaultdict(dict)
    for row in (
        session.query(
            db_models.WeeklyScore.week_number,
            db_models.WeeklyScore.artist_id,
            db_models.WeeklyScore.total_points,
        )
        .filter(db_models.WeeklyScore.week_number <= week_number)
        .all()
    ):
        scores_by_week[row.week_number][row.artist_id] = row.total_points

    featured_ids = {row.spotify_id for row in session.query(db_models.FeaturedArtist.spotify_id).all()}

    lineups_by_user: dict[Any, list] = defaultdict(list)
    for team in (
        session.query(db_models.Team)
        .filter(db_models.Team.week_number <= week_number)
        .order_by(db_models.Team.week_number.asc(), db_models.Team.id.asc())
        .all()
    ):
        lineups_by_user[team.user_id].append(team)

    log_date = log_date or today_utc()
    updated = 0
    for profile in session.query(db_models.Profile).all():
        new_total = calculate_user_total(
            lineups_by_user.get(profile.id, []),
            scores_by_week,
            featured_ids,
            week_number,
        )
        delta = new_total - (profile.total_score or 0)
        if delta <= 0:
            continue
        session.add(
            db_models.DailyScoreLog(
                user_id=profile.id,
                points_gained=delta,
                log_date=log_date,
                seen_by_user=False,
            )
        )
        profile.total_score = new_total
        profile.updated_at = now_utc()
        updated += 1
    return updated


def calculate_daily_scores(
    session: Session,
    spotify: SpotifyClient,
    log_date: date | None = None,
) -> dict[str, Any]:
    season = get_active_season(session)
    if season is None:
        return {"message": "No active season found. Skipping scoring."}

    week_number = get_latest_snapshot_week(session, season.id)
    if week_number is None:
        return {"message": "No snapshots found. Scoring cannot proceed."}

    snapshots = (
        session.query(db_models.WeeklySnapshot)
        .filter(
            db_models.WeeklySnapshot.season_id == season.id,
            db_models.WeeklySnapshot.week_number == week_number,
        )
        .all()
    )
    if not snapshots:
        return {"message": "No snapshots found for current week. Skipping scoring."}

    # Fail the run up front if Spotify refuses the credentials
    spotify.authenticate()

    logger.info("daily_scoring_started", week_number=week_number, artists=len(snapshots))
    scored = update_artist_scores(session, spotify, week_number, snapshots)
    resolve_pending_bets(session, week_number)
    session.flush()
    updated = update_user_totals(session, week_number, log_date)
    logger.info("daily_scoring_complete", week_number=week_number, artists_scored=scored, users_updated=updated)

    return {"success": True, "message": f"Scoring complete. Updated {updated} users."}

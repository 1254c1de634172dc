"""Weekly leaderboard payout.

Ranks every player with points, records the final standings for the week,
credits the MusiCoin reward of each rank tier and resets the weekly scores.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..db import db_models
from ..logging import logger
from .daily_scoring import get_latest_snapshot_week

# (lowest rank covered, tier name), checked in order
REWARD_TIERS: tuple[tuple[int, str], ...] = (
    (1, "rank_1"),
    (2, "rank_2"),
    (3, "rank_3"),
    (10, "top_10"),
    (20, "top_20"),
    (50, "top_50"),
    (100, "top_100"),
)


def reward_tier_for_rank(rank: int) -> str | None:
    for max_rank, tier in REWARD_TIERS:
        if rank <= max_rank:
            return tier
    return None


def reward_for_rank(rank: int, config: Mapping[str, int]) -> int:
    tier = reward_tier_for_rank(rank)
    if tier is None:
        return 0
    return config.get(tier) or 0


@dataclass(frozen=True)
class Standing:
    user_id: Any
    rank: int
    score: int
    listen_score: int
    reward: int


def rank_players(players: Iterable[Any], config: Mapping[str, int]) -> list[Standing]:
    """Order players by total + listen score (ties: higher listen score first)."""
    scored = []
    for player in players:
        total = player.total_score or 0
        listen = player.listen_score or 0
        if total + listen > 0:
            scored.append((player.id, total + listen, listen))

    scored.sort(key=lambda item: (-item[1], -item[2]))
    return [
        Standing(
            user_id=user_id,
            rank=index,
            score=combined,
            listen_score=listen,
            reward=reward_for_rank(index, config),
        )
        for index, (user_id, combined, listen) in enumerate(scored, start=1)
    ]


def process_weekly_leaderboard(session: Session) -> dict[str, Any]:
    profiles = (
        session.query(db_models.Profile)
        .filter(or_(db_models.Profile.total_score > 0, db_models.Profile.listen_score > 0))
        .all()
    )
    config = dict(
        session.query(
            db_models.LeaderboardConfig.tier,
            db_models.LeaderboardConfig.reward_musicoins,
        ).all()
    )
    standings = rank_players(profiles, config)
    logger.info("weekly_leaderboard_players", count=len(standings))
    if not standings:
        return {"message": "No active players found. Skipping."}

    week_number = get_latest_snapshot_week(session) or 1

    profiles_by_id = {profile.id: profile for profile in profiles}
    rewarded = 0
    for standing in standings:
        session.add(
            db_models.WeeklyLeaderboardHistory(
                user_id=standing.user_id,
                week_number=week_number,
                rank=standing.rank,
                score=standing.score,
                reward_musicoins=standing.reward,
                is_seen=False,
            )
        )
        if standing.reward > 0:
            profile = profiles_by_id[standing.user_id]
            profile.musi_coins = (profile.musi_coins or 0) + standing.reward
            rewarded += 1

    # Flush rewards before the bulk reset so the pending musi_coins changes are not lost
    session.flush()
    session.query(db_models.Profile).update(
        {"total_score": 0, "listen_score": 0},
        synchronize_session=False,
    )
    logger.info("weekly_leaderboard_processed", week_number=week_number, rewarded=rewarded)

    return {
        "success": True,
        "message": f"Weekly leaderboard processed for Week {week_number}. "
        f"Rewards assigned to {rewarded} players.",
    }

"""Celery tasks for the scheduled game jobs.

Each task returns the same JSON-shaped result the HTTP triggers use:
``{"message"}`` for a no-op, ``{"success": True, "message"}`` when work was
done and ``{"error"}`` when the run failed.
"""

from __future__ import annotations

from typing import Any

import httpx
from celery import shared_task

from ..api_client import trigger_weekly_snapshot as call_weekly_snapshot
from ..db import get_session
from ..logging import logger
from ..utils.redis_lock import LOCK_TIMEOUT_1HOUR, acquire_redis_lock, release_redis_lock


@shared_task(name="trigger_weekly_snapshot")
def trigger_weekly_snapshot() -> dict[str, Any]:
    """Ask the API to snapshot artist metrics for the current season week."""
    try:
        result = call_weekly_snapshot()
    except httpx.HTTPError as exc:
        logger.exception("weekly_snapshot_trigger_failed", error=str(exc))
        return {"error": str(exc)}

    logger.info("weekly_snapshot_triggered", result=result)
    return result


@shared_task(name="calculate_daily_scores")
def calculate_daily_scores() -> dict[str, Any]:
    from ..services.daily_scoring import calculate_daily_scores as run_daily_scoring
    from ..spotify.client import SpotifyClient

    if not acquire_redis_lock("lock:calculate_daily_scores", timeout=LOCK_TIMEOUT_1HOUR):
        logger.info("calculate_daily_scores_skipped_locked")
        return {"message": "Daily scoring already running. Skipping."}

    try:
        with SpotifyClient() as spotify, get_session() as session:
            result = run_daily_scoring(session, spotify)
    except Exception as exc:
        logger.exception("calculate_daily_scores_failed", error=str(exc))
        return {"error": str(exc)}
    finally:
        release_redis_lock("lock:calculate_daily_scores")

    logger.info("calculate_daily_scores_done", result=result)
    return result


@shared_task(name="process_weekly_leaderboard")
def process_weekly_leaderboard() -> dict[str, Any]:
    from ..services.weekly_leaderboard import process_weekly_leaderboard as run_leaderboard

    if not acquire_redis_lock(
        "lock:process_weekly_leaderboard", timeout=LOCK_TIMEOUT_1HOUR, fail_open=False
    ):
        logger.warning("process_weekly_leaderboard_skipped_locked")
        return {"message": "Weekly leaderboard already running. Skipping."}

    try:
        with get_session() as session:
            result = run_leaderboard(session)
    except Exception as exc:
        logger.exception("process_weekly_leaderboard_failed", error=str(exc))
        return {"error": str(exc)}
    finally:
        release_redis_lock("lock:process_weekly_leaderboard")

    logger.info("process_weekly_leaderboard_done", result=result)
    return result


__all__ = [
    "trigger_weekly_snapshot",
    "calculate_daily_scores",
    "process_weekly_leaderboard",
]

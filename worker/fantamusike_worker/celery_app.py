"""Celery app configuration for the FantaMusiké worker."""

from __future__ import annotations

from celery import Celery, signals
from celery.schedules import crontab

from .config import settings
from .logging import logger

QUEUE = settings.worker_queue

celery_config = {
    "task_serializer": "json",
    "accept_content": ["json"],
    "result_serializer": "json",
    "timezone": "UTC",
    "enable_utc": True,
    "task_track_started": True,
    "worker_prefetch_multiplier": 1,
    "task_time_limit": 3600,
    "task_soft_time_limit": 3300,
    "task_default_queue": QUEUE,
}

app = Celery(
    "fantamusike-worker",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["fantamusike_worker.jobs.tasks"],
)
app.conf.update(**celery_config)
app.conf.task_routes = {
    "trigger_weekly_snapshot": {"queue": QUEUE, "routing_key": QUEUE},
    "calculate_daily_scores": {"queue": QUEUE, "routing_key": QUEUE},
    "process_weekly_leaderboard": {"queue": QUEUE, "routing_key": QUEUE},
}
# All times UTC. The leaderboard closes the week on Sunday night; the new
# week's snapshot is taken just after midnight so daily scoring (03:00) always
# has a baseline for the current week.
app.conf.beat_schedule = {
    "weekly-snapshot-monday-0005-utc": {
        "task": "trigger_weekly_snapshot",
        "schedule": crontab(minute=5, hour=0, day_of_week="mon"),
        "options": {"queue": QUEUE, "routing_key": QUEUE},
    },
    "daily-scoring-0300-utc": {
        "task": "calculate_daily_scores",
        "schedule": crontab(minute=0, hour=3),
        "options": {"queue": QUEUE, "routing_key": QUEUE},
    },
    "weekly-leaderboard-sunday-2330-utc": {
        "task": "process_weekly_leaderboard",
        "schedule": crontab(minute=30, hour=23, day_of_week="sun"),
        "options": {"queue": QUEUE, "routing_key": QUEUE},
    },
}


@signals.worker_ready.connect
def on_worker_ready(sender=None, **kwargs):
    worker_name = getattr(sender, "hostname", None) or (str(sender) if sender else "unknown")
    logger.info("celery_worker_ready", worker=worker_name, queue=QUEUE)


@signals.worker_shutting_down.connect
def on_worker_shutting_down(sender=None, **kwargs):
    logger.info("celery_worker_shutting_down", worker=str(sender) if sender else "unknown")

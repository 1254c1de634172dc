"""Shared Redis distributed lock helpers."""
from __future__ import annotations

from ..logging import logger

LOCK_TIMEOUT_5MIN = 300
LOCK_TIMEOUT_1HOUR = 3600


def acquire_redis_lock(lock_name: str, timeout: int = LOCK_TIMEOUT_5MIN, fail_open: bool = True) -> bool:
    """Try to acquire a Redis lock. Returns True if acquired.

    When Redis is unreachable the lock is treated as acquired if ``fail_open``
    is set; jobs that pay out rewards pass ``fail_open=False``.
    """
    try:
        from ..config import settings
        import redis

        r = redis.from_url(settings.redis_url)
        return bool(r.set(lock_name, "1", nx=True, ex=timeout))
    except Exception as exc:
        logger.warning("redis_lock_failed", lock=lock_name, error=str(exc), fail_open=fail_open)
        return fail_open


def release_redis_lock(lock_name: str) -> None:
    """Release a Redis lock."""
    try:
        from ..config import settings
        import redis

        r = redis.from_url(settings.redis_url)
        r.delete(lock_name)
    except Exception as exc:
        logger.warning("redis_unlock_failed", lock=lock_name, error=str(exc))

"""Fail-fast environment validation for the worker and beat processes."""

from __future__ import annotations

import os
from functools import lru_cache
from urllib.parse import urlparse

ALLOWED_ENVIRONMENTS = {"development", "staging", "production"}
ALLOWED_WORKER_ROLES = {"worker", "beat"}


def require_env(name: str) -> str:
    """Fetch an environment variable or raise RuntimeError if missing."""
    value = os.getenv(name)
    if value is None or not value.strip():
        raise RuntimeError(f"{name} is required and must be set before startup.")
    return value.strip()


def validate_environment_value(environment: str) -> None:
    if environment not in ALLOWED_ENVIRONMENTS:
        allowed = ", ".join(sorted(ALLOWED_ENVIRONMENTS))
        raise RuntimeError(f"ENVIRONMENT must be one of: {allowed}.")


def validate_non_local_url(name: str, value: str) -> None:
    parsed = urlparse(value)
    host = parsed.hostname
    if not host:
        raise RuntimeError(f"{name} must be a valid URL (missing hostname).")
    if host in {"localhost", "127.0.0.1"}:
        raise RuntimeError(f"{name} must not point to localhost in production.")


def validate_database_credentials(value: str) -> None:
    parsed = urlparse(value)
    if parsed.username == "postgres" and parsed.password == "postgres":
        raise RuntimeError(
            "DATABASE_URL must not use default postgres credentials in production."
        )


@lru_cache(maxsize=1)
def validate_env() -> None:
    """Validate required environment variables before the worker starts.

    WORKER_ROLE decides which secrets a container needs:

        worker: runs the jobs, so it needs Spotify credentials and the
                API key used to call the snapshot trigger.
        beat:   only schedules tasks.
    """
    environment = require_env("ENVIRONMENT")
    validate_environment_value(environment)

    database_url = require_env("DATABASE_URL")
    redis_url = require_env("REDIS_URL")

    if environment == "production":
        validate_non_local_url("DATABASE_URL", database_url)
        validate_database_credentials(database_url)
        validate_non_local_url("REDIS_URL", redis_url)

        role = os.getenv("WORKER_ROLE", "worker")
        if role not in ALLOWED_WORKER_ROLES:
            allowed = ", ".join(sorted(ALLOWED_WORKER_ROLES))
            raise RuntimeError(f"WORKER_ROLE must be one of: {allowed}.")

        if role == "worker":
            require_env("SPOTIFY_CLIENT_ID")
            require_env("SPOTIFY_CLIENT_SECRET")
            require_env("API_KEY")

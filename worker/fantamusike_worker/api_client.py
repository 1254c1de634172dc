"""Internal API client helpers for worker → API calls."""

from __future__ import annotations

from typing import Any

import httpx

from .config import settings
from .logging import logger

WEEKLY_SNAPSHOT_PATH = "/functions/perform-weekly-snapshot"


def get_api_headers() -> dict[str, str]:
    """Return headers for internal API calls, including X-API-Key."""
    headers: dict[str, str] = {}
    if settings.api_key:
        headers["X-API-Key"] = settings.api_key
    return headers


def call_api_function(path: str, client: httpx.Client | None = None) -> dict[str, Any]:
    """POST an empty body to a scheduled-function endpoint and return its JSON.

    Error bodies (``{"error": ...}`` with status 500) are returned as-is so the
    caller can log them; transport failures raise ``httpx.HTTPError``.
    """
    url = f"{settings.api_internal_url.rstrip('/')}{path}"
    owns_client = client is None
    http = client or httpx.Client(timeout=settings.api_request_timeout_seconds)
    try:
        response = http.post(url, headers=get_api_headers())
    finally:
        if owns_client:
            http.close()

    try:
        payload = response.json()
    except ValueError:
        payload = {"error": f"Unexpected response from {path}: HTTP {response.status_code}"}

    if response.status_code >= 400:
        logger.error(
            "api_function_failed",
            path=path,
            status_code=response.status_code,
            body=payload,
        )
        if not isinstance(payload, dict) or "error" not in payload:
            payload = {"error": f"{path} returned HTTP {response.status_code}"}
    return payload


def trigger_weekly_snapshot(client: httpx.Client | None = None) -> dict[str, Any]:
    return call_api_function(WEEKLY_SNAPSHOT_PATH, client=client)

"""API key check for the scheduled-function and admin endpoints."""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from app.config import settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def _client_context(request: Request) -> dict[str, str]:
    return {
        "client_ip": request.client.host if request.client else "unknown",
        "path": request.url.path,
    }


async def verify_api_key(
    request: Request,
    api_key: str | None = Depends(API_KEY_HEADER),
) -> str:
    """Validate the X-API-Key header against API_KEY.

    When API_KEY is unset (local development) every request is allowed;
    validate_env refuses to start production without it.

    Raises:
        HTTPException: 401 if the key is missing or does not match.
    """
    if not settings.api_key:
        logger.warning("API_KEY not configured - allowing unauthenticated request")
        return ""

    if not api_key:
        logger.warning("Missing API key", extra=_client_context(request))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if not secrets.compare_digest(api_key, settings.api_key):
        logger.warning("Invalid API key attempt", extra=_client_context(request))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key

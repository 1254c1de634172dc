"""Spotify Web API client (client-credentials flow).

Only the read endpoints the scoring job needs are wrapped: artist metrics
and artist releases. Requests that hit a rate limit (429), a server error
(5xx) or a transport failure are retried with exponential backoff; any
other non-2xx status raises ``SpotifyAPIError``.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..config import settings
from ..logging import logger
from .models import SpotifyArtist, SpotifyRelease

RELEASE_GROUPS = "album,single,appears_on"


class SpotifyConfigError(RuntimeError):
    """Raised when Spotify credentials are not configured."""


class SpotifyAPIError(RuntimeError):
    """Raised when Spotify answers with a non-retryable error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SpotifyRetryableError(SpotifyAPIError):
    """429/5xx/expired-token responses; retried by the request wrapper."""


def _is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class SpotifyClient:
    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._client_id = client_id or settings.spotify_client_id
        self._client_secret = client_secret or settings.spotify_client_secret
        if not self._client_id or not self._client_secret:
            raise SpotifyConfigError(
                "Missing Spotify Client ID or Secret: set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET."
            )
        self._config = settings.spotify_config
        self.client = http_client or httpx.Client(
            headers={"User-Agent": "fantamusike-worker/1.0"},
            timeout=self._config.request_timeout_seconds,
        )
        self._access_token: str | None = None
        self._token_expires_at = 0.0

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> SpotifyClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------
    @retry(
        wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
        stop=stop_after_attempt(4),
        retry=retry_if_exception_type((SpotifyRetryableError, httpx.TransportError)),
        reraise=True,
    )
    def _fetch_token(self) -> dict[str, Any]:
        response = self.client.post(
            self._config.token_url,
            data={"grant_type": "client_credentials"},
            auth=(self._client_id, self._client_secret),
        )
        if _is_retryable_status(response.status_code):
            logger.warning("spotify_token_retry", status=response.status_code)
            raise SpotifyRetryableError("Spotify token request failed", response.status_code)
        if response.status_code != 200:
            raise SpotifyAPIError(
                f"Failed to get Spotify token (HTTP {response.status_code})",
                response.status_code,
            )
        return response.json()

    def authenticate(self) -> str:
        """Return a valid access token, requesting a new one when it is about to expire."""
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        payload = self._fetch_token()
        self._access_token = payload["access_token"]
        lifetime = int(payload.get("expires_in") or 3600)
        self._token_expires_at = time.monotonic() + max(
            lifetime - self._config.token_expiry_margin_seconds, 0
        )
        logger.debug("spotify_token_refreshed", expires_in=lifetime)
        return self._access_token

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------
    @retry(
        wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
        stop=stop_after_attempt(4),
        retry=retry_if_exception_type((SpotifyRetryableError, httpx.TransportError)),
        reraise=True,
    )
    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        token = self.authenticate()
        response = self.client.get(
            f"{self._config.api_base_url}{path}",
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )

        if response.status_code == 401:
            # Token revoked or expired early: drop it so the retry fetches a new one
            self._access_token = None
            raise SpotifyRetryableError("Spotify access token rejected", 401)
        if _is_retryable_status(response.status_code):
            logger.warning("spotify_request_retry", path=path, status=response.status_code)
            raise SpotifyRetryableError(
                f"Spotify API error {response.status_code} for {path}",
                response.status_code,
            )
        if response.status_code != 200:
            raise SpotifyAPIError(
                f"Spotify API error {response.status_code} for {path}",
                response.status_code,
            )
        return response.json()

    def get_artist(self, artist_id: str) -> SpotifyArtist:
        return SpotifyArtist.from_api(self._get(f"/artists/{artist_id}"))

    def get_artist_releases(self, artist_id: str) -> list[SpotifyRelease]:
        """Albums, singles and appearances for an artist, newest first, compilations dropped."""
        payload = self._get(
            f"/artists/{artist_id}/albums",
            params={
                "include_groups": RELEASE_GROUPS,
                "limit": self._config.releases_limit,
                "market": self._config.market,
            },
        )
        releases = [SpotifyRelease.from_api(item) for item in payload.get("items") or []]
        releases = [release for release in releases if release.album_type != "compilation"]
        return sorted(releases, key=lambda release: release.release_date or "", reverse=True)

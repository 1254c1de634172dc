"""Tests for worker → API calls."""

from __future__ import annotations

from unittest.mock import patch

import httpx

from fantamusike_worker.api_client import (
    WEEKLY_SNAPSHOT_PATH,
    call_api_function,
    get_api_headers,
    trigger_weekly_snapshot,
)


def test_headers_include_api_key() -> None:
    with patch("fantamusike_worker.api_client.settings") as mock_settings:
        mock_settings.api_key = "secret"
        assert get_api_headers() == {"X-API-Key": "secret"}


def test_headers_without_api_key() -> None:
    with patch("fantamusike_worker.api_client.settings") as mock_settings:
        mock_settings.api_key = None
        assert get_api_headers() == {}


def test_snapshot_trigger_posts_empty_body(mock_httpx_client) -> None:
    payload = {"message": "No new artists to snapshot for Week 3."}
    mock_httpx_client.post.return_value = httpx.Response(200, json=payload)

    with patch("fantamusike_worker.api_client.settings") as mock_settings:
        mock_settings.api_internal_url = "http://api:8000/"
        mock_settings.api_key = "secret"
        result = trigger_weekly_snapshot(client=mock_httpx_client)

    assert result == payload
    mock_httpx_client.post.assert_called_once_with(
        f"http://api:8000{WEEKLY_SNAPSHOT_PATH}",
        headers={"X-API-Key": "secret"},
    )
    mock_httpx_client.close.assert_not_called()


def test_server_error_body_passed_through(mock_httpx_client) -> None:
    mock_httpx_client.post.return_value = httpx.Response(500, json={"error": "connection refused"})
    assert call_api_function("/functions/x", client=mock_httpx_client) == {"error": "connection refused"}


def test_non_json_error_wrapped(mock_httpx_client) -> None:
    mock_httpx_client.post.return_value = httpx.Response(502, text="Bad Gateway")
    assert call_api_function("/functions/x", client=mock_httpx_client) == {
        "error": "Unexpected response from /functions/x: HTTP 502"
    }


def test_unauthorized_wrapped(mock_httpx_client) -> None:
    mock_httpx_client.post.return_value = httpx.Response(401, json={"detail": "Invalid API key"})
    assert call_api_function("/functions/x", client=mock_httpx_client) == {
        "error": "/functions/x returned HTTP 401"
    }

"""Typed views over the Spotify Web API payloads the worker reads."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..utils.datetime_utils import parse_release_date


@dataclass(frozen=True)
class SpotifyArtist:
    id: str
    name: str
    popularity: int
    followers: int
    image_url: str | None = None
    genres: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> SpotifyArtist:
        images = payload.get("images") or []
        return cls(
            id=payload["id"],
            name=payload.get("name") or "",
            popularity=int(payload.get("popularity") or 0),
            followers=int((payload.get("followers") or {}).get("total") or 0),
            image_url=images[0].get("url") if images else None,
            genres=tuple(payload.get("genres") or ()),
        )


@dataclass(frozen=True)
class SpotifyRelease:
    id: str
    name: str
    album_type: str
    release_date: str | None

    @property
    def released_at(self) -> datetime | None:
        return parse_release_date(self.release_date)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> SpotifyRelease:
        return cls(
            id=payload.get("id") or "",
            name=payload.get("name") or "",
            album_type=(payload.get("album_type") or "").lower(),
            release_date=payload.get("release_date"),
        )

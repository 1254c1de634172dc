"""Popularity tiers used to label artists in lineups and scoring logs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ArtistTier(str, Enum):
    BIG = "Big"
    MID = "Mid Tier"
    NEW_GEN = "New Gen"


@dataclass(frozen=True)
class TierRange:
    tier: ArtistTier
    min_popularity: int
    max_popularity: int

    def contains(self, popularity: int) -> bool:
        return self.min_popularity <= popularity <= self.max_popularity


ARTIST_TIERS: tuple[TierRange, ...] = (
    TierRange(ArtistTier.BIG, 66, 100),
    TierRange(ArtistTier.MID, 55, 65),
    TierRange(ArtistTier.NEW_GEN, 0, 54),
)


def classify_artist_tier(popularity: int) -> ArtistTier:
    """Map a 0-100 Spotify popularity to its tier; out-of-range values are clamped."""
    clamped = min(max(popularity, 0), 100)
    for tier_range in ARTIST_TIERS:
        if tier_range.contains(clamped):
            return tier_range.tier
    return ArtistTier.NEW_GEN

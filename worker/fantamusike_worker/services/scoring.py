"""Pure scoring rules: artist points, bet outcomes and user season totals.

Artist points for a week are measured against the week's snapshot:

    hype     = (popularity_now - popularity_snapshot) * 10
    fanbase  = round((followers_now - followers_snapshot) / max(followers_snapshot, 1) * 100)
    releases = +20 per single, +50 per album released since the snapshot
    total    = hype + fanbase + releases

Rounding is half-up (2.5 -> 3, -2.5 -> -2) everywhere.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from ..utils.datetime_utils import ensure_utc
from ..spotify.models import SpotifyRelease

HYPE_POINTS_PER_POPULARITY = 10
RELEASE_BONUS = {"single": 20, "album": 50}
CAPTAIN_MULTIPLIER = 1.5
FEATURED_CAPTAIN_MULTIPLIER = 2.0
BET_WIN_POINTS = 10
BET_WIN_COINS = 0

BET_WON = "won"
BET_LOST = "lost"
BET_DRAW = "draw"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class ArtistScore:
    popularity_gain: int
    follower_gain_percent: float
    release_bonus: int

    @property
    def hype_points(self) -> int:
        return self.popularity_gain * HYPE_POINTS_PER_POPULARITY

    @property
    def fanbase_points(self) -> int:
        return round_half_up(self.follower_gain_percent)

    @property
    def total_points(self) -> int:
        return self.hype_points + self.fanbase_points + self.release_bonus


def calculate_release_bonus(releases: Iterable[SpotifyRelease], since: datetime) -> int:
    """Sum the bonus of every single/album released on or after ``since``."""
    since = ensure_utc(since)
    bonus = 0
    for release in releases:
        released_at = release.released_at
        if released_at is None or released_at < since:
            continue
        bonus += RELEASE_BONUS.get(release.album_type, 0)
    return bonus


def calculate_artist_score(
    snapshot_popularity: int,
    snapshot_followers: int,
    current_popularity: int,
    current_followers: int,
    releases: Iterable[SpotifyRelease],
    since: datetime,
) -> ArtistScore:
    baseline_followers = snapshot_followers if snapshot_followers > 0 else 1
    return ArtistScore(
        popularity_gain=current_popularity - snapshot_popularity,
        follower_gain_percent=(current_followers - snapshot_followers) / baseline_followers * 100,
        release_bonus=calculate_release_bonus(releases, since),
    )


@dataclass(frozen=True)
class BetResolution:
    status: str
    my_delta: int
    rival_delta: int
    points_awarded: int
    coins_awarded: int

    @property
    def won(self) -> bool:
        return self.status == BET_WON

    def apply_to(self, bet_snapshot: Mapping[str, Any]) -> dict[str, Any]:
        """Return a new snapshot dict carrying the outcome."""
        return {
            **bet_snapshot,
            "status": self.status,
            "scores": {"my": self.my_delta, "rival": self.rival_delta},
            "won_points": self.points_awarded,
            "won_coins": self.coins_awarded,
        }


def resolve_bet(
    artist_id: str,
    bet_snapshot: Mapping[str, Any],
    current_scores: Mapping[str, int],
) -> BetResolution:
    """Decide a head-to-head bet from each side's point gain since the bet.

    ``bet_snapshot`` carries ``rival.id``, ``wager`` (``"my_artist"`` or
    ``"rival"``) and the ``initial_scores`` recorded when the bet was placed.

    Raises:
        KeyError: if the snapshot has no rival.
    """
    rival_id = bet_snapshot["rival"]["id"]
    initial = bet_snapshot.get("initial_scores") or {}

    my_delta = current_scores.get(artist_id, 0) - (initial.get("my") or 0)
    rival_delta = current_scores.get(rival_id, 0) - (initial.get("rival") or 0)
    wager = bet_snapshot.get("wager")

    if my_delta == rival_delta:
        status = BET_DRAW
    elif wager == "my_artist" and my_delta > rival_delta:
        status = BET_WON
    elif wager == "rival" and rival_delta > my_delta:
        status = BET_WON
    else:
        status = BET_LOST

    won = status == BET_WON
    return BetResolution(
        status=status,
        my_delta=my_delta,
        rival_delta=rival_delta,
        points_awarded=BET_WIN_POINTS if won else 0,
        coins_awarded=BET_WIN_COINS if won else 0,
    )


class Lineup(Protocol):
    week_number: int
    captain_id: str | None

    @property
    def slot_ids(self) -> list[str | None]: ...


def active_lineup(lineups: Sequence[Lineup], week_number: int) -> Lineup | None:
    """Latest lineup saved for ``week_number`` or earlier (``lineups`` sorted by week)."""
    active = None
    for lineup in lineups:
        if lineup.week_number > week_number:
            break
        active = lineup
    return active


def captain_points(points: int, artist_id: str, featured_ids: set[str]) -> int:
    multiplier = FEATURED_CAPTAIN_MULTIPLIER if artist_id in featured_ids else CAPTAIN_MULTIPLIER
    return round_half_up(points * multiplier)


def calculate_user_total(
    lineups: Sequence[Lineup],
    scores_by_week: Mapping[int, Mapping[str, int]],
    featured_ids: set[str],
    through_week: int,
) -> int:
    """Season total for one user over weeks 1..``through_week``."""
    total = 0
    for week in range(1, through_week + 1):
        lineup = active_lineup(lineups, week)
        if lineup is None:
            continue
        week_scores = scores_by_week.get(week, {})
        for artist_id in lineup.slot_ids:
            if not artist_id:
                continue
            points = week_scores.get(artist_id, 0)
            if artist_id == lineup.captain_id:
                points = captain_points(points, artist_id, featured_ids)
            total += points
    return total

"""Tests for the pure scoring rules."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fantamusike_worker.services.scoring import (
    BET_DRAW,
    BET_LOST,
    BET_WIN_POINTS,
    BET_WON,
    active_lineup,
    calculate_artist_score,
    calculate_release_bonus,
    calculate_user_total,
    captain_points,
    resolve_bet,
    round_half_up,
)

SNAPSHOT_AT = datetime(2026, 10, 12, 0, 5, tzinfo=timezone.utc)


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(2.5, 3), (3.5, 4), (4.5, 5), (2.4, 2), (-2.5, -2), (-2.6, -3), (0.0, 0)],
    )
    def test_rounding(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected


class TestReleaseBonus:
    def test_single_and_album_after_snapshot(self, make_release) -> None:
        releases = [
            make_release("single", "2026-10-14", "s1"),
            make_release("album", "2026-10-15", "a1"),
        ]
        assert calculate_release_bonus(releases, SNAPSHOT_AT) == 70

    def test_releases_before_snapshot_ignored(self, make_release) -> None:
        releases = [make_release("single", "2026-10-01"), make_release("album", "2025")]
        assert calculate_release_bonus(releases, SNAPSHOT_AT) == 0

    def test_same_day_release_before_snapshot_time_ignored(self, make_release) -> None:
        # Release dates resolve to midnight UTC, the snapshot ran at 00:05
        assert calculate_release_bonus([make_release("single", "2026-10-12")], SNAPSHOT_AT) == 0

    def test_compilation_and_unknown_types_ignored(self, make_release) -> None:
        releases = [
            make_release("compilation", "2026-10-14"),
            make_release("appears_on", "2026-10-14"),
        ]
        assert calculate_release_bonus(releases, SNAPSHOT_AT) == 0

    def test_malformed_date_ignored(self, make_release) -> None:
        assert calculate_release_bonus([make_release("album", "soon")], SNAPSHOT_AT) == 0

    def test_naive_snapshot_time_treated_as_utc(self, make_release) -> None:
        naive = datetime(2026, 10, 12, 0, 5)
        assert calculate_release_bonus([make_release("single", "2026-10-13")], naive) == 20


class TestArtistScore:
    def test_growth_and_single_release(self, make_release) -> None:
        score = calculate_artist_score(
            snapshot_popularity=50,
            snapshot_followers=1000,
            current_popularity=53,
            current_followers=1100,
            releases=[make_release("single", "2026-10-13")],
            since=SNAPSHOT_AT,
        )

        assert score.hype_points == 30
        assert score.fanbase_points == 10
        assert score.release_bonus == 20
        assert score.total_points == 60

    def test_popularity_drop_is_negative(self) -> None:
        score = calculate_artist_score(70, 5000, 68, 5000, [], SNAPSHOT_AT)
        assert score.popularity_gain == -2
        assert score.total_points == -20

    def test_zero_follower_baseline_uses_one(self) -> None:
        score = calculate_artist_score(10, 0, 10, 3, [], SNAPSHOT_AT)
        assert score.follower_gain_percent == pytest.approx(300.0)
        assert score.fanbase_points == 300

    def test_fractional_growth_rounds_half_up(self) -> None:
        score = calculate_artist_score(10, 200, 10, 205, [], SNAPSHOT_AT)
        assert score.follower_gain_percent == pytest.approx(2.5)
        assert score.fanbase_points == 3


class TestResolveBet:
    def _snapshot(self, wager: str, my: int = 0, rival: int = 0) -> dict:
        return {"rival": {"id": "R"}, "wager": wager, "initial_scores": {"my": my, "rival": rival}}

    def test_equal_deltas_draw(self) -> None:
        outcome = resolve_bet("M", self._snapshot("my_artist", 10, 5), {"M": 20, "R": 15})
        assert outcome.status == BET_DRAW
        assert outcome.points_awarded == 0

    def test_backed_artist_ahead_wins(self) -> None:
        outcome = resolve_bet("M", self._snapshot("my_artist"), {"M": 30, "R": 10})
        assert outcome.status == BET_WON
        assert outcome.points_awarded == BET_WIN_POINTS
        assert (outcome.my_delta, outcome.rival_delta) == (30, 10)

    def test_rival_wager_wins_when_rival_ahead(self) -> None:
        outcome = resolve_bet("M", self._snapshot("rival"), {"M": 5, "R": 6})
        assert outcome.status == BET_WON

    def test_wager_side_behind_loses(self) -> None:
        outcome = resolve_bet("M", self._snapshot("rival"), {"M": 6, "R": 5})
        assert outcome.status == BET_LOST
        assert outcome.points_awarded == 0

    def test_missing_scores_default_to_zero(self) -> None:
        outcome = resolve_bet("M", {"rival": {"id": "R"}, "wager": "my_artist"}, {})
        assert outcome.status == BET_DRAW

    def test_missing_rival_raises(self) -> None:
        with pytest.raises(KeyError):
            resolve_bet("M", {"wager": "my_artist"}, {})

    def test_apply_to_keeps_original_fields(self) -> None:
        snapshot = self._snapshot("my_artist")
        snapshot["placed_at"] = "2026-10-13"
        outcome = resolve_bet("M", snapshot, {"M": 1})
        applied = outcome.apply_to(snapshot)

        assert applied["placed_at"] == "2026-10-13"
        assert applied["status"] == BET_WON
        assert applied["scores"] == {"my": 1, "rival": 0}
        assert applied["won_points"] == BET_WIN_POINTS
        assert "status" not in snapshot


class TestUserTotals:
    def test_captain_multipliers(self) -> None:
        assert captain_points(10, "A", featured_ids=set()) == 15
        assert captain_points(10, "A", featured_ids={"A"}) == 20
        assert captain_points(3, "A", featured_ids=set()) == 5

    def test_active_lineup_is_latest_not_after_week(self, make_lineup) -> None:
        lineups = [make_lineup(1, ["A"]), make_lineup(3, ["B"])]
        assert active_lineup(lineups, 1) is lineups[0]
        assert active_lineup(lineups, 2) is lineups[0]
        assert active_lineup(lineups, 3) is lineups[1]

    def test_no_lineup_before_first_save(self, make_lineup) -> None:
        assert active_lineup([make_lineup(2, ["A"])], 1) is None

    def test_total_across_weeks(self, make_lineup) -> None:
        lineups = [
            make_lineup(1, ["A", "B", None], captain_id="A"),
            make_lineup(2, ["B", "C"], captain_id="C"),
        ]
        scores = {
            1: {"A": 10, "B": 4},
            2: {"A": 100, "B": 5, "C": 6},
            3: {"B": 1, "C": 2},
        }

        total = calculate_user_total(lineups, scores, featured_ids={"C"}, through_week=3)

        # week 1: A captain 15 + B 4; week 2: B 5 + C featured captain 12; week 3: B 1 + C 4
        assert total == 19 + 17 + 5

    def test_total_with_no_lineups_is_zero(self) -> None:
        assert calculate_user_total([], {1: {"A": 10}}, set(), through_week=1) == 0

    def test_negative_points_count(self, make_lineup) -> None:
        lineups = [make_lineup(1, ["A"], captain_id="A")]
        assert calculate_user_total(lineups, {1: {"A": -5}}, set(), through_week=1) == -7

"""Initial FantaMusiké schema.

Revision ID: 20261001_000001
Revises:
Create Date: 2026-10-01
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261001_000001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("username", sa.String(20), nullable=True, unique=True),
        sa.Column("total_score", sa.Integer(), server_default="0", nullable=False),
        sa.Column("listen_score", sa.Integer(), server_default="0", nullable=False),
        sa.Column("musi_coins", sa.Integer(), server_default="0", nullable=False),
        sa.Column("is_admin", sa.Boolean(), server_default="false", nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )

    op.create_table(
        "seasons",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("status", sa.String(20), server_default="upcoming", nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_seasons_is_active", "seasons", ["is_active"])

    op.create_table(
        "artists_cache",
        sa.Column("spotify_id", sa.String(64), primary_key=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("current_popularity", sa.Integer(), nullable=False),
        sa.Column("current_followers", sa.Integer(), nullable=False),
        _timestamp("last_updated"),
    )

    op.create_table(
        "featured_artists",
        sa.Column("spotify_id", sa.String(64), primary_key=True),
        _timestamp("created_at"),
    )

    op.create_table(
        "weekly_snapshots",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("season_id", sa.Uuid(), sa.ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("artist_id", sa.String(64), nullable=False),
        sa.Column("popularity", sa.Integer(), nullable=False),
        sa.Column("followers", sa.Integer(), nullable=False),
        _timestamp("created_at"),
        sa.UniqueConstraint(
            "season_id", "week_number", "artist_id", name="uq_weekly_snapshot_season_week_artist"
        ),
    )
    op.create_index(
        "idx_weekly_snapshots_season_week", "weekly_snapshots", ["season_id", "week_number"]
    )

    op.create_table(
        "weekly_scores",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("artist_id", sa.String(64), nullable=False),
        sa.Column("popularity_gain", sa.Integer(), nullable=False),
        sa.Column("follower_gain_percent", sa.Float(), nullable=False),
        sa.Column("release_bonus", sa.Integer(), nullable=False),
        sa.Column("total_points", sa.Integer(), nullable=False),
        _timestamp("updated_at"),
        sa.UniqueConstraint("week_number", "artist_id", name="uq_weekly_score_week_artist"),
    )

    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("slot_1_id", sa.String(64), nullable=True),
        sa.Column("slot_2_id", sa.String(64), nullable=True),
        sa.Column("slot_3_id", sa.String(64), nullable=True),
        sa.Column("slot_4_id", sa.String(64), nullable=True),
        sa.Column("slot_5_id", sa.String(64), nullable=True),
        sa.Column("captain_id", sa.String(64), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("idx_teams_user_week", "teams", ["user_id", "week_number"])

    op.create_table(
        "daily_promos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("artist_id", sa.String(64), nullable=False),
        sa.Column("promo_date", sa.Date(), server_default=sa.text("CURRENT_DATE"), nullable=False),
        sa.Column("bet_done", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("bet_resolved", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("bet_snapshot", postgresql.JSONB(), nullable=True),
        sa.Column("total_points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_coins", sa.Integer(), server_default="0", nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_daily_promos_user_id", "daily_promos", ["user_id"])
    op.create_index(
        "idx_daily_promos_pending_bets",
        "daily_promos",
        ["bet_done", "bet_resolved"],
        postgresql_where=sa.text("bet_done AND NOT bet_resolved"),
    )

    op.create_table(
        "daily_score_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("points_gained", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("seen_by_user", sa.Boolean(), server_default="false", nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_daily_score_logs_user_id", "daily_score_logs", ["user_id"])

    op.create_table(
        "leaderboard_config",
        sa.Column("tier", sa.String(20), primary_key=True),
        sa.Column("reward_musicoins", sa.Integer(), nullable=False),
    )
    op.bulk_insert(
        sa.table(
            "leaderboard_config",
            sa.column("tier", sa.String),
            sa.column("reward_musicoins", sa.Integer),
        ),
        [
            {"tier": "rank_1", "reward_musicoins": 500},
            {"tier": "rank_2", "reward_musicoins": 300},
            {"tier": "rank_3", "reward_musicoins": 200},
            {"tier": "top_10", "reward_musicoins": 100},
            {"tier": "top_20", "reward_musicoins": 50},
            {"tier": "top_50", "reward_musicoins": 25},
            {"tier": "top_100", "reward_musicoins": 10},
        ],
    )

    op.create_table(
        "weekly_leaderboard_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("reward_musicoins", sa.Integer(), nullable=False),
        sa.Column("is_seen", sa.Boolean(), server_default="false", nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_weekly_leaderboard_history_user_id", "weekly_leaderboard_history", ["user_id"])
    op.create_index("idx_leaderboard_history_week", "weekly_leaderboard_history", ["week_number"])


def downgrade() -> None:
    op.drop_table("weekly_leaderboard_history")
    op.drop_table("leaderboard_config")
    op.drop_table("daily_score_logs")
    op.drop_table("daily_promos")
    op.drop_table("teams")
    op.drop_table("weekly_scores")
    op.drop_table("weekly_snapshots")
    op.drop_table("featured_artists")
    op.drop_table("artists_cache")
    op.drop_table("seasons")
    op.drop_table("profiles")

"""Weekly leaderboard payout models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class LeaderboardConfig(Base):
    """MusiCoin reward per rank tier (rank_1, rank_2, rank_3, top_10 ... top_100)."""

    __tablename__ = "leaderboard_config"

    tier: Mapped[str] = mapped_column(String(20), primary_key=True)
    reward_musicoins: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class WeeklyLeaderboardHistory(Base):
    """Final standing of a player for a finished week."""

    __tablename__ = "weekly_leaderboard_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    rank: Mapped[int] = mapped_column(Integer, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    reward_musicoins: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_seen: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("idx_leaderboard_history_week", "week_number"),
    )

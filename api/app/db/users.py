"""Player profile, lineup and daily activity models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import text

from .base import Base


class Profile(Base):
    """Game-side profile of an authenticated user (ids come from the identity provider)."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    username: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    total_score: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    listen_score: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    musi_coins: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class Team(Base):
    """A lineup saved for ``week_number``; it stays in effect until a later lineup is saved."""

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    slot_1_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    slot_2_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    slot_3_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    slot_4_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    slot_5_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    captain_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (Index("idx_teams_user_week", "user_id", "week_number"),)

    @property
    def slot_ids(self) -> list[str | None]:
        return [self.slot_1_id, self.slot_2_id, self.slot_3_id, self.slot_4_id, self.slot_5_id]


class DailyPromo(Base):
    """A user's daily promo card; carries the head-to-head bet when one is placed."""

    __tablename__ = "daily_promos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    artist_id: Mapped[str] = mapped_column(String(64), nullable=False)
    promo_date: Mapped[date] = mapped_column(Date, server_default=func.current_date(), nullable=False)
    bet_done: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    bet_resolved: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )
    # {"rival": {"id": ...}, "wager": "my_artist" | "rival",
    #  "initial_scores": {"my": int, "rival": int}, ...}
    bet_snapshot: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    total_points: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    total_coins: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index(
            "idx_daily_promos_pending_bets",
            "bet_done",
            "bet_resolved",
            postgresql_where=text("bet_done AND NOT bet_resolved"),
        ),
    )


class DailyScoreLog(Base):
    """Points a user gained in one daily scoring run, shown once in the daily recap."""

    __tablename__ = "daily_score_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    points_gained: Mapped[int] = mapped_column(Integer, nullable=False)
    log_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    seen_by_user: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

"""Season, artist metrics and weekly scoring models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Season(Base):
    """A scoring period. At most one season is flagged active at a time."""

    __tablename__ = "seasons"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False, index=True
    )
    # upcoming | active | calculating | completed
    status: Mapped[str] = mapped_column(
        String(20), default="upcoming", server_default="upcoming", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class ArtistCache(Base):
    """Latest known Spotify metrics for an artist picked by at least one user."""

    __tablename__ = "artists_cache"

    spotify_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    current_popularity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    current_followers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class FeaturedArtist(Base):
    """Promoted artists; captaining one doubles its points instead of x1.5."""

    __tablename__ = "featured_artists"

    spotify_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class WeeklySnapshot(Base):
    """Immutable per-artist popularity/follower baseline for one season week."""

    __tablename__ = "weekly_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    season_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False
    )
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    artist_id: Mapped[str] = mapped_column(String(64), nullable=False)
    popularity: Mapped[int] = mapped_column(Integer, nullable=False)
    followers: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "season_id", "week_number", "artist_id", name="uq_weekly_snapshot_season_week_artist"
        ),
        Index("idx_weekly_snapshots_season_week", "season_id", "week_number"),
    )


class WeeklyScore(Base):
    """Points an artist has earned so far in a week, recomputed daily."""

    __tablename__ = "weekly_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    artist_id: Mapped[str] = mapped_column(String(64), nullable=False)
    popularity_gain: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    follower_gain_percent: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    release_bonus: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("week_number", "artist_id", name="uq_weekly_score_week_artist"),
    )

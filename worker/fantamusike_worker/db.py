"""
Database helpers for the worker service.

Synchronous sessions for Celery tasks. The ORM models are imported from the
API package so both services share one schema definition.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from types import SimpleNamespace
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import settings
from .logging import logger

# Make the API's ``app`` package importable for the shared models
API_PATH = Path(__file__).resolve().parents[2] / "api"
if str(API_PATH) not in sys.path:
    sys.path.insert(0, str(API_PATH))

try:
    from app.db.game import (  # type: ignore
        ArtistCache,
        FeaturedArtist,
        Season,
        WeeklyScore,
        WeeklySnapshot,
    )
    from app.db.leaderboard import (  # type: ignore
        LeaderboardConfig,
        WeeklyLeaderboardHistory,
    )
    from app.db.users import (  # type: ignore
        DailyPromo,
        DailyScoreLog,
        Profile,
        Team,
    )

    db_models = SimpleNamespace(
        # Season and artist metrics
        Season=Season,
        ArtistCache=ArtistCache,
        FeaturedArtist=FeaturedArtist,
        WeeklySnapshot=WeeklySnapshot,
        WeeklyScore=WeeklyScore,
        # Players
        Profile=Profile,
        Team=Team,
        DailyPromo=DailyPromo,
        DailyScoreLog=DailyScoreLog,
        # Leaderboard
        LeaderboardConfig=LeaderboardConfig,
        WeeklyLeaderboardHistory=WeeklyLeaderboardHistory,
    )
except ImportError as exc:
    raise RuntimeError(
        "Unable to import fantamusike api models. "
        "Did you install the API service dependencies?"
    ) from exc


engine = create_engine(
    settings.database_url,
    future=True,
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    class_=Session,
)


@contextmanager
def get_session() -> Iterator[Session]:
    """
    Provide a transactional session: commit on success, rollback on error.

    Usage:
        with get_session() as session:
            session.add(obj)
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception as exc:
        session.rollback()
        logger.exception("db_session_rollback", error=str(exc))
        raise
    finally:
        session.close()


__all__ = ["get_session", "db_models", "engine"]

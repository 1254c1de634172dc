"""Database models and session management.

Import models from their respective modules:
    from app.db.game import Season, ArtistCache, WeeklySnapshot
    from app.db.users import Profile, Team

Session management:
    from app.db import AsyncSession, get_db
"""

from __future__ import annotations

from typing import TYPE_CHECKING, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .base import Base

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

from ..config import settings

# Created on first use so importing models never opens a connection pool.
_engine: "AsyncEngine | None" = None
_AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _get_engine() -> "AsyncEngine":
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            settings.database_url, echo=settings.sql_echo, future=True, pool_pre_ping=True
        )
    return _engine


def _get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _AsyncSessionLocal
    if _AsyncSessionLocal is None:
        _AsyncSessionLocal = async_sessionmaker(
            _get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )
    return _AsyncSessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions with commit/rollback semantics."""
    session_factory = _get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def close_db() -> None:
    """Dispose the engine (called on application shutdown)."""
    global _engine, _AsyncSessionLocal
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _AsyncSessionLocal = None


__all__ = ["Base", "AsyncSession", "get_db", "close_db"]

"""
Typed settings for the FantaMusiké worker service.

Uses Pydantic Settings to load configuration from environment variables
with validation and type safety. Settings are loaded from the root .env
file so the API and the worker share one configuration source.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .validate_env import validate_env


class SpotifyConfig(BaseModel):
    token_url: str = Field(default="https://accounts.spotify.com/api/token")
    api_base_url: str = Field(default="https://api.spotify.com/v1")
    # Market used when listing an artist's releases
    market: str = Field(default="IT")
    request_timeout_seconds: int = 15
    releases_limit: int = 50
    # Refresh the access token this many seconds before Spotify expires it
    token_expiry_margin_seconds: int = 60


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    In Docker, environment variables are passed directly via docker-compose.
    For local development, loads from the root .env file.
    """
    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[2] / ".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="allow",
    )

    database_url: str = Field(..., alias="DATABASE_URL")

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_async_to_sync(cls, v: str) -> str:
        """
        Convert asyncpg URL to psycopg URL for synchronous SQLAlchemy.

        The root .env file uses asyncpg (for FastAPI), but Celery workers
        need synchronous psycopg. This keeps a single DATABASE_URL.
        """
        if isinstance(v, str) and "asyncpg" in v:
            return v.replace("asyncpg", "psycopg")
        return v

    redis_url: str = Field("redis://localhost:6379/2", alias="REDIS_URL")
    redis_host: str = Field("localhost", alias="REDIS_HOST")
    redis_password: str | None = Field(None, alias="REDIS_PASSWORD")
    redis_db: int = Field(2, alias="REDIS_DB")

    @model_validator(mode="after")
    def _build_redis_url(self) -> Settings:
        """Build the Redis URL from components when REDIS_HOST is not localhost (Docker)."""
        if self.redis_host != "localhost":
            if self.redis_password:
                self.redis_url = f"redis://:{self.redis_password}@{self.redis_host}:6379/{self.redis_db}"
            else:
                self.redis_url = f"redis://{self.redis_host}:6379/{self.redis_db}"
        return self

    spotify_client_id: str | None = Field(None, alias="SPOTIFY_CLIENT_ID")
    spotify_client_secret: str | None = Field(None, alias="SPOTIFY_CLIENT_SECRET")
    spotify_config: SpotifyConfig = Field(default_factory=SpotifyConfig)
    environment: str = Field("development", alias="ENVIRONMENT")
    log_level: str | None = Field(None, alias="LOG_LEVEL")
    api_internal_url: str = Field("http://api:8000", alias="API_INTERNAL_URL")
    api_key: str | None = Field(None, alias="API_KEY")
    api_request_timeout_seconds: int = Field(60, alias="API_REQUEST_TIMEOUT_SECONDS")
    worker_queue: str = Field("fantamusike-worker", alias="CELERY_DEFAULT_QUEUE")
    spotify_market_override: str | None = Field(None, alias="SPOTIFY_MARKET")

    @model_validator(mode="after")
    def _apply_spotify_overrides(self) -> Settings:
        """Allow SPOTIFY_MARKET to override the nested Spotify config."""
        if self.spotify_market_override:
            self.spotify_config.market = self.spotify_market_override.strip().upper()
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached settings instance (environment is validated first)."""
    validate_env()
    return Settings()


settings = get_settings()

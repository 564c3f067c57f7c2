"""
issue_tracker.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT signing secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Process configuration, read from `TRACKER_*` environment variables.

    `jwt_secret` has no default: a missing secret is a deployment error and the
    app factory refuses to start without one.
    """

    model_config = SettingsConfigDict(env_prefix="TRACKER_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "issue-tracker"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 4000

    # Session tokens
    jwt_alg: str = "HS256"
    jwt_issuer: str = "issue-tracker"
    jwt_audience: str = "issue-tracker-api"
    jwt_secret: str | None = Field(default=None, repr=False)

    # Password hashing cost; tests drop this to the bcrypt minimum.
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./tracker.db"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every layer receives this object explicitly; nothing reads os.environ directly.

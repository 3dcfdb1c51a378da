"""
Centralised settings loader (pydantic-settings).

Every field maps to the upper-cased env var of the same name and can
also come from a local `.env` file.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime ────────────────────────────────────────────────────
    env_name: str = "local"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # ─── document store ─────────────────────────────────────────────
    database_url: str | None = "sqlite+aiosqlite:///./nutrition.db"
    cloud_sql_connection_name: str | None = None
    db_user: str | None = None
    db_pass: str | None = None
    db_name: str | None = None

    # the .env may carry keys for other tools (uvicorn, scripts)
    model_config = SettingsConfigDict(
        extra="ignore", env_file=".env", env_file_encoding="utf-8"
    )


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()

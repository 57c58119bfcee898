from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ─────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────
class Settings(BaseSettings):
    """
    Canonical configuration object.

    Read from QUARRY_* environment variables, then .env; environment wins.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUARRY_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # ─── Storage ───
    database_url: str | None = None           # None → in-memory store
    seed: bool = True

    # ─── Transport ───
    graphql_path: str = "/api/graphql"

    # ─── Execution ───
    execution_timeout: float | None = Field(10.0, gt=0)
    document_cache_size: int = Field(256, ge=1)
    max_batch_size: int | None = Field(None, ge=1)

    # ─── Misc ───
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ("Settings", "get_settings")

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNC_DRIVERS = ("postgresql+psycopg_async", "postgresql+psycopg", "sqlite+aiosqlite")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "HomeoCore Suggestions"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    REMEDY_DB_URL: str = "sqlite+aiosqlite:///data/remedies.db"
    RANKING_CONFIG_PATH: Optional[str] = None

    @field_validator("REMEDY_DB_URL")
    @classmethod
    def validate_remedy_db_url(cls, v: str) -> str:
        scheme = v.split("://", 1)[0]
        if scheme not in _ASYNC_DRIVERS:
            raise ValueError(
                "REMEDY_DB_URL must use an async driver: " + ", ".join(_ASYNC_DRIVERS)
            )
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()

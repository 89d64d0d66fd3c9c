from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/moodjournal.db",
        alias="DATABASE_URL",
    )
    log_file: Path = Field(default=Path("logs/moodjournal.log"))

    # Optional text-generation enhancer
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")
    ai_enhancer_enabled: bool = Field(default=True, alias="AI_ENHANCER_ENABLED")
    ai_timeout_seconds: float = Field(default=10.0, alias="AI_TIMEOUT_SECONDS")
    ai_max_tokens: int = Field(default=400, alias="AI_MAX_TOKENS")

    recent_entries_limit: int = Field(default=5, alias="RECENT_ENTRIES_LIMIT")
    export_setting_keys: list[str] = Field(
        default_factory=lambda: ["notificationsEnabled", "reminderTime"],
        alias="EXPORT_SETTING_KEYS",
    )

    version: str = Field(default_factory=lambda: Settings._load_version())

    @staticmethod
    def _load_version() -> str:
        version_env = os.getenv("VERSION")
        if version_env:
            return version_env
        version_file = Path("VERSION")
        if version_file.exists():
            return version_file.read_text(encoding="utf-8").strip()
        return "0.0.0"

    @property
    def ai_available(self) -> bool:
        return self.ai_enhancer_enabled and bool(self.openai_api_key)

    @field_validator("log_file", mode="before")
    @classmethod
    def _validate_log_file(cls, value: Path | str) -> Path:
        path = Path(value)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("ai_timeout_seconds", mode="before")
    @classmethod
    def _validate_ai_timeout(cls, value: float | str | None) -> float:
        if value is None:
            return 10.0
        timeout = float(value)
        return max(timeout, 1.0)

    @field_validator("recent_entries_limit", mode="before")
    @classmethod
    def _validate_recent_limit(cls, value: int | str | None) -> int:
        if value is None:
            return 5
        return min(max(int(value), 1), 100)

    @field_validator("database_url", mode="before")
    @classmethod
    def _validate_database_url(cls, value: str | None) -> str:
        if not value:
            value = "sqlite:///./data/moodjournal.db"

        normalized = str(value)
        if normalized.startswith("sqlite://") and "+aiosqlite" not in normalized:
            normalized = normalized.replace("sqlite://", "sqlite+aiosqlite://", 1)

        if normalized.startswith("sqlite+aiosqlite:///"):
            db_path = normalized.split("///", maxsplit=1)[-1]
            if db_path and db_path != ":memory:":
                db_file = Path(db_path)
                db_file.parent.mkdir(parents=True, exist_ok=True)

        return normalized


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()

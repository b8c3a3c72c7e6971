"""Configuration settings for scripture_study."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

DatabaseBackend = Literal["postgresql", "sqlite"]
AIProvider = Literal["openai", "anthropic"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Settings loaded from ``SCRIPTURE_*`` environment variables or ``.env``.

    Settings are constructed explicitly and handed to the objects that need
    them; there is no module-level instance.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCRIPTURE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Database ────────────────────────────────────────────────────────────
    db_backend: DatabaseBackend = "sqlite"
    pg_host: str = "localhost"
    pg_port: int = 5432
    pg_database: str = "bible_db"
    pg_user: str = ""
    pg_password: str = ""
    sqlite_path: Path = Path("./local_bible.db")
    database_echo: bool = False

    # ── Display ─────────────────────────────────────────────────────────────
    default_translation: str = "KJV"

    # ── AI assistant ────────────────────────────────────────────────────────
    ai_provider: AIProvider = "openai"
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    openai_base_url: str | None = None  # OpenAI-compatible gateways
    ai_model: str = "gpt-4"
    ai_max_tokens: int = 1000
    ai_temperature: float = 0.7
    # Verses on each side of the current one sent as passage context
    context_verses: int = Field(default=3, ge=0, le=10)

    # ── Audio / notes ───────────────────────────────────────────────────────
    audio_base_path: Path = Path("./public/audio")
    notes_dir: Path = Path("./notes")

    # ── Logging ─────────────────────────────────────────────────────────────
    log_level: LogLevel = "WARNING"
    log_api_calls: bool = False

    @property
    def database_url(self) -> URL:
        """SQLAlchemy async URL for the selected backend."""
        if self.db_backend == "postgresql":
            return URL.create(
                "postgresql+asyncpg",
                username=self.pg_user or None,
                password=self.pg_password or None,
                host=self.pg_host,
                port=self.pg_port,
                database=self.pg_database,
            )
        return URL.create("sqlite+aiosqlite", database=str(self.sqlite_path))

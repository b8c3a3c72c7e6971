"""Tests for Settings."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from scripture_study.config import Settings


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """No stray .env file or SCRIPTURE_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("SCRIPTURE_"):
            monkeypatch.delenv(name)


def test_defaults() -> None:
    settings = Settings()

    assert settings.db_backend == "sqlite"
    assert settings.default_translation == "KJV"
    assert settings.ai_provider == "openai"
    assert settings.context_verses == 3
    assert settings.database_url.render_as_string() == "sqlite+aiosqlite:///local_bible.db"


def test_sqlite_url(tmp_path: Path) -> None:
    settings = Settings(sqlite_path=tmp_path / "bible.db")

    url = settings.database_url

    assert url.drivername == "sqlite+aiosqlite"
    assert url.database == str(tmp_path / "bible.db")


def test_postgresql_url_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCRIPTURE_DB_BACKEND", "postgresql")
    monkeypatch.setenv("SCRIPTURE_PG_HOST", "db.internal")
    monkeypatch.setenv("SCRIPTURE_PG_PORT", "6543")
    monkeypatch.setenv("SCRIPTURE_PG_USER", "reader")
    monkeypatch.setenv("SCRIPTURE_PG_PASSWORD", "p@ss")

    url = Settings().database_url

    assert url.drivername == "postgresql+asyncpg"
    assert url.host == "db.internal"
    assert url.port == 6543
    assert url.username == "reader"
    assert url.password == "p@ss"
    assert url.database == "bible_db"


def test_postgresql_url_without_credentials() -> None:
    url = Settings(db_backend="postgresql").database_url

    assert url.username is None
    assert url.password is None
    assert url.host == "localhost"


def test_env_file(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("SCRIPTURE_AI_PROVIDER=anthropic\nSCRIPTURE_AI_MODEL=claude-3\n")

    settings = Settings()

    assert settings.ai_provider == "anthropic"
    assert settings.ai_model == "claude-3"


@pytest.mark.parametrize(
    "overrides",
    [
        {"db_backend": "mysql"},
        {"ai_provider": "gemini"},
        {"context_verses": 11},
        {"context_verses": -1},
        {"log_level": "LOUD"},
        {"log_level": "debug"},
    ],
)
def test_rejects_invalid(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(**overrides)


def test_log_level_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCRIPTURE_LOG_LEVEL", "DEBUG")

    assert Settings().log_level == "DEBUG"

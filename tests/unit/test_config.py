from __future__ import annotations

from pathlib import Path

import pytest

from backend.app.core import config
from backend.app.core.config import get_settings


@pytest.fixture(autouse=True)
def reset_settings_cache() -> None:
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


def test_settings_read_version_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("VERSION", "9.9.9")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.chdir(tmp_path)

    settings = get_settings()

    assert settings.version == "9.9.9"
    assert settings.ai_available is True
    assert settings.log_file.parent.exists()


def test_settings_fallback_to_version_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    version_file = tmp_path / "VERSION"
    version_file.write_text("1.2.3", encoding="utf-8")
    monkeypatch.delenv("VERSION", raising=False)
    monkeypatch.chdir(tmp_path)

    settings = get_settings()

    assert settings.version == "1.2.3"
    assert settings.log_file.parent.exists()


def test_enhancer_can_be_switched_off(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("AI_ENHANCER_ENABLED", "false")
    monkeypatch.chdir(tmp_path)

    assert get_settings().ai_available is False


def test_plain_sqlite_url_is_upgraded(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    db_file = tmp_path / "nested" / "journal.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("RECENT_ENTRIES_LIMIT", "500")
    monkeypatch.setenv("AI_TIMEOUT_SECONDS", "0.1")
    monkeypatch.chdir(tmp_path)

    settings = get_settings()

    assert settings.database_url == f"sqlite+aiosqlite:///{db_file}"
    assert db_file.parent.exists()
    assert settings.recent_entries_limit == 100
    assert settings.ai_timeout_seconds == 1.0

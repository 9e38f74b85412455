"""Tests for environment-driven settings."""

from pathlib import Path

from joshi_news.config import Settings, get_settings


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.delenv("INTER_ORG_DELAY")

    settings = Settings.from_env()

    assert settings.data_dir == Path(tmp_path)
    assert settings.news_file == Path(tmp_path) / "news-data.json"
    assert settings.storage_backend == "json"
    assert settings.inter_org_delay == 2.0
    assert settings.retention_limit == 100
    assert settings.constrained_runtime is False
    assert settings.sqlalchemy_url == f"sqlite:///{Path(tmp_path) / 'news.db'}"


def test_overrides(monkeypatch):
    monkeypatch.setenv("NEWS_STORAGE_BACKEND", "SQL")
    monkeypatch.setenv("DATABASE_URL", "postgresql://news@db/news")
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")
    monkeypatch.setenv("NEWS_CONSTRAINED_RUNTIME", "true")

    settings = Settings.from_env()

    assert settings.storage_backend == "sql"
    assert settings.sqlalchemy_url == "postgresql://news@db/news"
    assert settings.request_timeout == 5.0
    assert settings.constrained_runtime is True


def test_functions_worker_counts_as_constrained(monkeypatch):
    monkeypatch.setenv("FUNCTIONS_WORKER_RUNTIME", "python")

    assert Settings.from_env().constrained_runtime is True


def test_invalid_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("REQUEST_TIMEOUT", "soon")
    monkeypatch.setenv("NEWS_RETENTION_LIMIT", "many")

    settings = Settings.from_env()

    assert settings.request_timeout == 10.0
    assert settings.retention_limit == 100


def test_get_settings_is_cached():
    assert get_settings() is get_settings()

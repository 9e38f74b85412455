"""Tests for FastAPI lifecycle management.

These tests verify that:
- Startup creates the configured storage unless one was injected
- A failing storage backend leaves the app up with no storage
- Shutdown closes the storage and clears the ready flag
"""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

from fastapi import FastAPI

from backend.app.lifecycle import lifespan, shutdown_resources, startup_resources
from joshi_news.config import get_settings
from joshi_news.storage.json_store import JsonNewsStorage


def test_lifespan_context_manager_registers_correctly():
    app = FastAPI(lifespan=lifespan)
    assert app.router.lifespan_context is not None


def test_startup_creates_configured_storage(tmp_path):
    app = FastAPI()

    asyncio.run(startup_resources(app))

    assert isinstance(app.state.news_storage, JsonNewsStorage)
    assert app.state.news_storage.path == tmp_path / "news-data.json"
    assert app.state.ready is True


def test_startup_keeps_injected_storage():
    app = FastAPI()
    injected = MagicMock()
    app.state.news_storage = injected

    asyncio.run(startup_resources(app))

    assert app.state.news_storage is injected


def test_startup_failure_leaves_storage_unset(monkeypatch):
    monkeypatch.setenv("NEWS_STORAGE_BACKEND", "bogus")
    get_settings.cache_clear()
    app = FastAPI()

    asyncio.run(startup_resources(app))

    assert app.state.news_storage is None
    assert app.state.ready is True


def test_shutdown_closes_storage_and_clears_ready():
    app = FastAPI()
    storage = MagicMock()
    app.state.news_storage = storage
    asyncio.run(startup_resources(app))

    asyncio.run(shutdown_resources(app))

    storage.close.assert_called_once()
    assert app.state.ready is False


def test_shutdown_survives_close_errors():
    app = FastAPI()
    storage = MagicMock()
    storage.close.side_effect = RuntimeError("engine already disposed")
    app.state.news_storage = storage

    asyncio.run(shutdown_resources(app))


def test_shutdown_without_close_method(tmp_path):
    app = FastAPI()
    app.state.news_storage = JsonNewsStorage(tmp_path / "news.json")
    app.state.ready = True

    asyncio.run(shutdown_resources(app))

    assert app.state.ready is False

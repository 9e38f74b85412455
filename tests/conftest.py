"""Pytest-wide fixtures for the news collector tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock

import pytest
import requests
from requests.utils import get_encoding_from_headers

from joshi_news.config import Settings, get_settings
from joshi_news.models import NewsItem, OrganizationConfig, SelectorSet

JST = timezone(timedelta(hours=9))


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every test at a private data directory with no delays."""
    monkeypatch.setenv("NEWS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("INTER_ORG_DELAY", "0")
    monkeypatch.setenv("NEWS_TIMEZONE", "Asia/Tokyo")
    for key in (
        "NEWS_STORAGE_BACKEND",
        "DATABASE_URL",
        "NEWS_CONSTRAINED_RUNTIME",
        "FUNCTIONS_WORKER_RUNTIME",
        "SELENIUM_REMOTE_URL",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=Path(tmp_path),
        inter_org_delay=0,
        render_settle_seconds=0,
        navigation_backoff=0,
    )


@pytest.fixture
def organization() -> OrganizationConfig:
    return OrganizationConfig(
        name="example",
        display_name="Example Pro",
        base_url="https://example.com",
        news_list_url="https://example.com/news",
        selectors=SelectorSet(
            news_items=".news-item",
            title=".title",
            summary=".summary",
            thumbnail="img",
            published_at=".date",
            detail_url="a",
        ),
    )


@pytest.fixture
def make_item():
    """Factory for NewsItem records with sensible defaults."""

    def _make(
        id: str = "item-1",
        organization: str = "stardom",
        published_at: Optional[datetime] = None,
        title: Optional[str] = None,
    ) -> NewsItem:
        return NewsItem(
            id=id,
            title=title or f"Title {id}",
            summary="",
            thumbnail="",
            published_at=published_at or datetime(2025, 1, 10, tzinfo=JST),
            detail_url=f"https://example.com/news/{id}",
            organization=organization,
            source_url="https://example.com/news",
        )

    return _make


def make_response(
    body: str | bytes = "",
    status_code: int = 200,
    charset: Optional[str] = "utf-8",
    url: str = "https://example.com/news",
) -> requests.Response:
    """Build a real ``requests.Response`` without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    if isinstance(body, str):
        body = body.encode(charset or "utf-8")
    response._content = body
    content_type = "text/html"
    if charset:
        content_type += f"; charset={charset}"
    response.headers["Content-Type"] = content_type
    response.encoding = get_encoding_from_headers(response.headers)
    return response


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def mock_session():
    """Stand-in for the cloudscraper session."""
    return MagicMock(spec=requests.Session)

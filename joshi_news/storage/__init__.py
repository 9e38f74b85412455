"""Persistence for collected news.

Two backends share the ``NewsStorage`` protocol: a JSON file (the
default) and a SQL table through SQLAlchemy. Both keep only the newest
``retention_limit`` records and never replace a record whose id is
already stored.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, Optional, Protocol

from ..config import Settings, get_settings
from ..models import NewsItem

logger = logging.getLogger(__name__)


class NewsStorage(Protocol):
    def save(self, items: list[NewsItem]) -> None: ...

    def load_latest(self, limit: int = 20) -> list[NewsItem]: ...

    def load_by_organization(self, organization: Optional[str] = None) -> list[NewsItem]: ...

    def statistics(self) -> dict[str, Any]: ...

    def clear(self) -> None: ...


def sort_newest_first(items: Iterable[NewsItem]) -> list[NewsItem]:
    return sorted(items, key=lambda item: item.published_at, reverse=True)


def merge_news(
    existing: list[NewsItem], new: list[NewsItem], limit: int = 100
) -> list[NewsItem]:
    """Merge ``new`` into ``existing`` without replacing stored records.

    Items whose id is already present (in either list) are dropped, the
    result is ordered newest first and truncated to ``limit``.
    """
    seen = {item.id for item in existing}
    merged = list(existing)
    added = 0
    for item in new:
        if item.id in seen:
            continue
        seen.add(item.id)
        merged.append(item)
        added += 1

    logger.info(f"Merging news: {added} new, {len(new) - added} already stored")
    return sort_newest_first(merged)[:limit]


def compute_statistics(items: list[NewsItem]) -> dict[str, Any]:
    """Totals per organization plus the newest publication time.

    ``items`` must already be ordered newest first.
    """
    counts = Counter(item.organization for item in items)
    return {
        "total": len(items),
        "by_organization": dict(counts),
        "latest_update": items[0].published_at.isoformat() if items else None,
    }


def get_storage(settings: Optional[Settings] = None) -> NewsStorage:
    """Storage backend selected by ``NEWS_STORAGE_BACKEND``."""
    settings = settings or get_settings()
    backend = settings.storage_backend

    if backend == "sql":
        from .sql_store import SqlNewsStorage

        return SqlNewsStorage(settings.sqlalchemy_url, limit=settings.retention_limit)
    if backend != "json":
        raise ValueError(f"Unknown storage backend: {backend!r}")

    from .json_store import JsonNewsStorage

    return JsonNewsStorage(settings.news_file, limit=settings.retention_limit)


__all__ = [
    "NewsStorage",
    "compute_statistics",
    "get_storage",
    "merge_news",
    "sort_newest_first",
]

"""Flat-file storage: one JSON array of news records."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from ..models import NewsItem
from . import compute_statistics, merge_news

logger = logging.getLogger(__name__)


class JsonNewsStorage:
    """Keeps the newest ``limit`` records in a JSON file.

    Records are written newest first with the camelCase keys of
    ``NewsItem.to_dict``. A missing or unreadable file reads as empty.
    """

    def __init__(self, path: Path, limit: int = 100):
        self.path = Path(path)
        self.limit = limit

    def load(self) -> list[NewsItem]:
        if not self.path.exists():
            return []
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
            return [NewsItem.from_dict(entry) for entry in data]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Could not read news file {self.path}: {e}")
            return []

    def save(self, items: list[NewsItem]) -> None:
        merged = merge_news(self.load(), items, limit=self.limit)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write-then-rename so readers never see a partial file
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump([item.to_dict() for item in merged], f, ensure_ascii=False, indent=2)
        tmp_path.replace(self.path)
        logger.info(f"Saved {len(merged)} items to {self.path}")

    def load_latest(self, limit: int = 20) -> list[NewsItem]:
        return self.load()[:limit]

    def load_by_organization(self, organization: Optional[str] = None) -> list[NewsItem]:
        items = self.load()
        if not organization:
            return items
        return [item for item in items if item.organization == organization]

    def statistics(self) -> dict[str, Any]:
        return compute_statistics(self.load())

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
        logger.info(f"Cleared news file {self.path}")

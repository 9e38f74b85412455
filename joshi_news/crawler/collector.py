"""Batch driver: scrape every organization once and persist the results."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from ..config import get_settings
from ..models import NewsItem, OrganizationConfig, ScrapingResult
from ..organizations import ORGANIZATIONS

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Summary of one collection cycle."""

    results: list[ScrapingResult] = field(default_factory=list)
    collected: int = 0
    statistics: Optional[dict[str, Any]] = None

    @property
    def succeeded(self) -> list[str]:
        return [r.organization for r in self.results if r.success]

    @property
    def failed(self) -> list[str]:
        return [r.organization for r in self.results if not r.success]

    @property
    def errors(self) -> dict[str, str]:
        return {r.organization: r.error for r in self.results if r.error}


def news_collector(
    scraper=None,
    storage=None,
    organizations: Sequence[OrganizationConfig] = ORGANIZATIONS,
    delay: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchResult:
    """Scrape ``organizations`` sequentially and save what was collected.

    One organization failing never stops the others. Storage errors
    propagate to the caller. The scraper's browser engines are released
    before returning, whatever happened.
    """
    settings = get_settings()
    if scraper is None:
        from . import NewsScraper

        scraper = NewsScraper(settings)
    if storage is None:
        from ..storage import get_storage

        storage = get_storage(settings)
    delay = settings.inter_org_delay if delay is None else delay

    batch = BatchResult()
    try:
        before = storage.statistics()
        logger.info(f"Storage reachable; {before.get('total', 0)} items stored")

        collected: list[NewsItem] = []
        for index, organization in enumerate(organizations):
            result = scraper.scrape_news(organization)
            batch.results.append(result)

            if result.success:
                collected.extend(result.news_items)
                logger.info(f"{organization.name}: {len(result.news_items)} items")
                if result.error:
                    logger.warning(f"{organization.name}: {result.error}")
            else:
                logger.error(f"{organization.name}: {result.error}")

            if index < len(organizations) - 1 and delay > 0:
                sleep(delay)

        batch.collected = len(collected)
        if collected:
            storage.save(collected)
        else:
            logger.warning("No news items collected in this batch")

        batch.statistics = storage.statistics()
        logger.info(
            f"Batch complete: {batch.collected} collected, "
            f"{len(batch.succeeded)} ok, {len(batch.failed)} failed, "
            f"{batch.statistics.get('total', 0)} stored"
        )
    finally:
        try:
            scraper.close()
        except Exception as e:
            logger.warning(f"Error releasing scraper resources: {e}")

    return batch

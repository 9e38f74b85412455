"""Per-organization scraping: fetch, extract and normalize listings."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from bs4 import BeautifulSoup

from ..config import Settings, get_settings
from ..models import Candidate, NewsItem, OrganizationConfig, ScrapingResult
from ..utils.dates import parse_date
from ..utils.normalize import generate_id, resolve_url
from .errors import BrowserUnavailableError, ExtractionError, FetchError
from .extractors import MAX_CANDIDATES, ExtractionContext, SiteExtractor, get_extractor
from .fetcher import ContentFetcher

logger = logging.getLogger(__name__)


class NewsScraper:
    """Turns one organization's listing page into ``NewsItem`` records.

    The scraper owns a ``ContentFetcher`` (and through it the browser
    engines) for the lifetime of a batch; call ``close()`` or use it as a
    context manager.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        fetcher: Optional[ContentFetcher] = None,
        extractor_lookup: Callable[[str], SiteExtractor] = get_extractor,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or get_settings()
        self.fetcher = fetcher or ContentFetcher(self.settings)
        self.extractor_lookup = extractor_lookup
        self.clock = clock

    def scrape_news(self, organization: OrganizationConfig) -> ScrapingResult:
        """Scrape ``organization``; never raises."""
        logger.info(f"Scraping {organization.display_name} ({organization.news_list_url})")

        try:
            html = self.fetcher.fetch_page_content(organization.news_list_url, organization)
            if not html:
                raise FetchError(f"Failed to fetch {organization.news_list_url}")

            soup = BeautifulSoup(html, "html.parser")
            extractor = self.extractor_lookup(organization.name)
            context = ExtractionContext(
                organization=organization, automation=self.fetcher.automation
            )
            candidates = extractor.run(soup, context)
            news_items = self.build_items(organization, candidates)
        except Exception as e:
            logger.error(f"Scraping failed for {organization.display_name}: {e}")
            if organization.flaky and self.settings.constrained_runtime:
                return ScrapingResult(
                    success=True,
                    organization=organization.name,
                    news_items=[],
                    error=(
                        f"Skipped {organization.display_name} in constrained runtime: {e}"
                    ),
                )
            return ScrapingResult(
                success=False, organization=organization.name, error=str(e)
            )

        logger.info(f"Scraped {organization.display_name}: {len(news_items)} items")
        return ScrapingResult(
            success=True, organization=organization.name, news_items=news_items
        )

    def build_items(
        self, organization: OrganizationConfig, candidates: list[Candidate]
    ) -> list[NewsItem]:
        news_items = []
        for candidate in candidates[:MAX_CANDIDATES]:
            if not candidate.title or not candidate.detail_url:
                logger.warning(
                    f"Missing title or detail URL for {organization.display_name}; skipping"
                )
                continue
            try:
                news_items.append(self.build_item(organization, candidate))
            except (ValueError, TypeError, AttributeError) as e:
                logger.error(f"Could not normalize item for {organization.display_name}: {e}")
        return news_items

    def build_item(self, organization: OrganizationConfig, candidate: Candidate) -> NewsItem:
        now = self.clock() if self.clock else None
        return NewsItem(
            id=generate_id(organization.name, candidate.title, candidate.published_text),
            title=candidate.title.strip(),
            summary=candidate.summary.strip(),
            thumbnail=resolve_url(candidate.thumbnail, organization.base_url),
            published_at=parse_date(candidate.published_text, now=now),
            detail_url=resolve_url(candidate.detail_url, organization.base_url),
            organization=organization.name,
            source_url=organization.news_list_url,
        )

    def close(self) -> None:
        self.fetcher.close()

    def __enter__(self) -> "NewsScraper":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


__all__ = [
    "BrowserUnavailableError",
    "ContentFetcher",
    "ExtractionError",
    "FetchError",
    "NewsScraper",
]

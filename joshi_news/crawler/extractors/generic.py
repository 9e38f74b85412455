"""Selector-driven extractor used for organizations without a dedicated one."""

from __future__ import annotations

from bs4 import BeautifulSoup

from ...models import Candidate
from .base import ExtractionContext, SiteExtractor, select_attr, select_text


class GenericExtractor(SiteExtractor):
    """Reads each field with the organization's ``SelectorSet``."""

    name = "generic"

    def extract(self, soup: BeautifulSoup, context: ExtractionContext) -> list[Candidate]:
        selectors = context.organization.selectors
        candidates = []

        for item in soup.select(selectors.news_items):
            title = select_text(item, selectors.title)
            detail_url = select_attr(item, selectors.detail_url, "href")
            if not title or not detail_url:
                continue
            candidates.append(
                Candidate(
                    title=title,
                    summary=select_text(item, selectors.summary),
                    thumbnail=select_attr(item, selectors.thumbnail, "src"),
                    published_text=select_text(item, selectors.published_at),
                    detail_url=detail_url,
                )
            )

        return candidates

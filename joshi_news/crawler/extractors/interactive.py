"""Extractors that drive the automation session beyond a single render."""

from __future__ import annotations

import logging
import re

from selenium.common.exceptions import WebDriverException

from ...models import Candidate
from ..errors import BrowserUnavailableError
from .base import SiteExtractor, TextPattern, first_match, text_of

logger = logging.getLogger(__name__)

_BRACKETED_TITLE = re.compile(r"【(.+?)】")


def block_fingerprint(text: str) -> str:
    """Key used to pair a clicked block with its parsed title."""
    match = _BRACKETED_TITLE.search(text)
    if match:
        return match.group(1)
    return text.strip()[:50]


class SeadlinnngExtractor(SiteExtractor):
    """Article blocks carry no links; detail URLs come from clicking them.

    Each block is clicked in the automation session and the resulting
    location is recorded under the block's fingerprint. Parsed titles are
    paired with those URLs by substring match; unmatched titles link to
    the listing itself.
    """

    name = "seadlinnng"
    min_title_length = 4

    block_selector = "article.item-acvinfo"
    date_patterns = (TextPattern(re.compile(r"(\d{4}\.\d{2}\.\d{2})")),)
    category_prefix = re.compile(r"^[A-Z]+\s+")
    max_blocks = 10

    def discover_detail_urls(self, context) -> dict[str, str]:
        if context.automation is None:
            return {}
        try:
            return context.automation.click_through(
                context.organization.news_list_url,
                self.block_selector,
                block_fingerprint,
                max_blocks=self.max_blocks,
            )
        except (BrowserUnavailableError, WebDriverException) as e:
            logger.warning(f"seadlinnng: detail URL discovery unavailable: {e}")
            return {}

    @staticmethod
    def match_detail_url(title: str, detail_urls: dict[str, str], default: str) -> str:
        for key, url in detail_urls.items():
            if not key:
                continue
            if key in title or title[:20] in key:
                return url
        return default

    def extract(self, soup, context):
        listing_url = context.organization.news_list_url
        detail_urls = self.discover_detail_urls(context)

        candidates = []
        for block in soup.select(self.block_selector):
            text = text_of(block, " ")
            match = first_match(self.date_patterns, text)
            if not match:
                continue

            title = self.category_prefix.sub("", text[match.end():].strip()).strip()
            if not title:
                continue
            candidates.append(
                Candidate(
                    title=title,
                    published_text=match.group(1),
                    detail_url=self.match_detail_url(title, detail_urls, listing_url),
                )
            )
        return candidates

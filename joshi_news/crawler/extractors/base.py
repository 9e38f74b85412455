"""Shared machinery for listing extractors.

Every extractor turns a parsed listing page into ``Candidate`` records.
``SiteExtractor.run`` wraps the site-specific ``extract`` with the rules
all sites share: link and navigation filtering, minimum title length,
exact-duplicate removal and the per-page cap.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from ...models import Candidate, OrganizationConfig
from ...utils.normalize import clean_text, is_navigation_label, is_rejected_link
from ..browser import AutomationSession
from ..errors import ExtractionError

logger = logging.getLogger(__name__)

MAX_CANDIDATES = 10

Cleanup = tuple[re.Pattern, str]


@dataclass
class ExtractionContext:
    """What an extractor may use besides the parsed listing."""

    organization: OrganizationConfig
    automation: Optional[AutomationSession] = None


@dataclass(frozen=True)
class TextPattern:
    """Regex that pulls one field out of free text.

    Lower ``priority`` values are tried first; the first capture group is
    the extracted value.
    """

    pattern: re.Pattern
    priority: int = 0


def first_match(patterns: Iterable[TextPattern], text: str) -> Optional[re.Match]:
    for text_pattern in sorted(patterns, key=lambda p: p.priority):
        match = text_pattern.pattern.search(text)
        if match:
            return match
    return None


def apply_cleanups(text: str, cleanups: Sequence[Cleanup]) -> str:
    for pattern, replacement in cleanups:
        text = pattern.sub(replacement, text)
    return clean_text(text)


def text_of(tag: Optional[Tag], separator: str = "") -> str:
    if tag is None:
        return ""
    return clean_text(tag.get_text(separator))


def select_text(tag: Tag, selector: str, separator: str = "") -> str:
    """Text of the first descendant matching ``selector``."""
    if not selector:
        return ""
    return text_of(tag.select_one(selector), separator)


def attr_of(tag: Optional[Tag], *attrs: str) -> str:
    """First non-empty attribute value among ``attrs``."""
    if tag is None:
        return ""
    for attr in attrs:
        value = tag.get(attr)
        if isinstance(value, list):
            value = " ".join(value)
        if value and value.strip():
            return value.strip()
    return ""


def select_attr(tag: Tag, selector: str, *attrs: str) -> str:
    if not selector:
        return ""
    return attr_of(tag.select_one(selector), *attrs)


def closest(tag: Tag, selector: str) -> Optional[Tag]:
    """Nearest ancestor (or ``tag`` itself) matching ``selector``."""
    return tag.css.closest(selector)


class SiteExtractor:
    """Base class for per-organization listing extractors."""

    name = "generic"
    # Titles shorter than this are dropped
    min_title_length = 1

    def extract(self, soup: BeautifulSoup, context: ExtractionContext) -> list[Candidate]:
        raise NotImplementedError

    def accept(self, candidate: Candidate) -> bool:
        """Shared filters; empty titles and links are left to the caller."""
        if candidate.detail_url and is_rejected_link(candidate.detail_url):
            return False
        if candidate.title:
            if is_navigation_label(candidate.title):
                return False
            if len(candidate.title) < self.min_title_length:
                return False
        return True

    def filter(self, candidates: Iterable[Candidate]) -> list[Candidate]:
        accepted: list[Candidate] = []
        seen: set[tuple[str, str]] = set()

        for candidate in candidates:
            candidate.title = clean_text(candidate.title)
            candidate.summary = clean_text(candidate.summary)
            candidate.thumbnail = candidate.thumbnail.strip()
            candidate.published_text = clean_text(candidate.published_text)
            candidate.detail_url = candidate.detail_url.strip()

            if not self.accept(candidate):
                continue
            key = (candidate.title, candidate.detail_url)
            if key in seen:
                continue
            seen.add(key)
            accepted.append(candidate)
            if len(accepted) >= MAX_CANDIDATES:
                break

        return accepted

    def run(self, soup: BeautifulSoup, context: ExtractionContext) -> list[Candidate]:
        """Extract, filter and cap the candidates for one listing page."""
        try:
            raw = self.extract(soup, context)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ExtractionError(f"{self.name} extractor failed: {e}") from e

        candidates = self.filter(raw)
        logger.info(
            f"{self.name}: {len(candidates)} candidates from "
            f"{context.organization.news_list_url}"
        )
        return candidates

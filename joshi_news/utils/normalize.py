"""Text and URL normalization helpers shared by every extractor.

These helpers are deliberately small and pure so that the same listing
markup always normalizes to the same record:

- ``clean_text`` collapses whitespace runs (including full-width spaces)
- ``resolve_url`` turns listing hrefs into absolute URLs
- ``generate_id`` derives the stable record id
- ``truncate_title`` shortens run-on titles at a sentence boundary
"""

from __future__ import annotations

import hashlib
import re

_WHITESPACE_RE = re.compile(r"[\s　]+")
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")

# Menu and footer labels that show up as anchors on listing pages
NAVIGATION_LABELS = frozenset(
    label.lower()
    for label in (
        "HOME",
        "TOP",
        "NEWS",
        "SCHEDULE",
        "RESULTS",
        "DATABASE",
        "WRESTLER",
        "GOODS",
        "CONTACT",
        "ABOUT",
        "PREV",
        "NEXT",
        "YouTube",
        "Instagram",
        "X",
        "Twitter",
        "トップ",
        "ニュース",
        "スケジュール",
        "結果",
        "選手紹介",
        "イベント",
        "お問い合わせ",
        "チケット",
    )
)

SENTENCE_ENDINGS = ("。", "！", "？", "」")


def clean_text(value: str | None) -> str:
    """Collapse whitespace runs to a single space and trim."""
    if not value:
        return ""
    return _WHITESPACE_RE.sub(" ", value).strip()


def is_navigation_label(text: str) -> bool:
    """Return True when ``text`` is a bare menu label or page number."""
    normalized = clean_text(text)
    if not normalized:
        return False
    if normalized.isdigit():
        return True
    return normalized.lower() in NAVIGATION_LABELS


def is_rejected_link(href: str | None) -> bool:
    """Fragment-only and script pseudo-URLs never point at an article."""
    if not href:
        return True
    href = href.strip()
    return href.startswith("#") or href.lower().startswith("javascript:")


def has_scheme(url: str) -> bool:
    return bool(_SCHEME_RE.match(url))


def resolve_url(url: str | None, base_url: str) -> str:
    """Resolve a listing href against the organization's base URL.

    Protocol-relative URLs get ``https:``, root-relative URLs are appended
    to the base, URLs that already carry a scheme are returned unchanged
    and anything else is joined to the base with a slash.
    """
    if not url:
        return ""
    url = url.strip()
    if not url:
        return ""
    if url.startswith("//"):
        return f"https:{url}"
    if has_scheme(url):
        return url
    base = base_url.rstrip("/")
    if url.startswith("/"):
        return f"{base}{url}"
    return f"{base}/{url}"


def generate_id(organization: str, title: str, published_text: str) -> str:
    """Stable identifier for a news record.

    The id only depends on the organization key, the raw title and the raw
    published-date text, so repeated scrapes of one article collapse to a
    single stored record.
    """
    source = f"{organization}-{title}-{published_text}"
    return hashlib.md5(source.encode("utf-8")).hexdigest()


def truncate_title(title: str, limit: int = 100, boundary_floor: int = 80) -> str:
    """Shorten ``title`` to roughly ``limit`` characters.

    Prefers cutting right after Japanese sentence punctuation, then at a
    space, as long as the cut lands after ``boundary_floor`` characters.
    """
    if len(title) <= limit:
        return title

    head = title[:limit].strip()
    last_punctuation = max(head.rfind(mark) for mark in SENTENCE_ENDINGS)
    last_space = head.rfind(" ")

    if last_punctuation > boundary_floor:
        head = head[: last_punctuation + 1]
    elif last_space > boundary_floor:
        head = head[:last_space]

    return head.strip()


def replacement_ratio(text: str) -> float:
    """Fraction of U+FFFD replacement characters in ``text``."""
    if not text:
        return 0.0
    return text.count("\ufffd") / len(text)

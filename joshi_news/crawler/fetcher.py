"""Listing page acquisition with an ordered fallback chain.

``ContentFetcher.fetch_page_content`` walks ``DEFAULT_STRATEGIES`` in
order and returns the first usable document:

1. ``automation``       rendered through a WebDriver session
                        (organizations flagged ``use_selenium`` only)
2. ``http``             plain GET with a browser User-Agent
3. ``legacy_encoding``  raw bytes decoded as Shift_JIS / EUC-JP / CP932
                        (when the plain text looked corrupted, or for
                        organizations with an encoding hint)
4. ``browser_render``   local headless Chrome, with navigation retries
                        for flaky organizations
5. ``degraded``         when no browser can be started, the best
                        corrupted text seen so far

A strategy either returns a ``FetchAttempt`` or raises one of
``RECOVERABLE_FETCH_ERRORS``; either way the chain moves on. ``None`` is
returned only when every strategy is exhausted.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

import cloudscraper
import requests
from selenium.common.exceptions import WebDriverException

from ..config import Settings, get_settings
from ..models import OrganizationConfig
from ..utils.normalize import replacement_ratio
from .browser import AutomationSession, BrowserRenderer
from .errors import BrowserUnavailableError, FetchError

logger = logging.getLogger(__name__)

# Tried in order; CP932 is the Windows superset of Shift_JIS
LEGACY_ENCODINGS = ("shift_jis", "euc_jp", "cp932")

RECOVERABLE_FETCH_ERRORS = (
    requests.RequestException,
    FetchError,
    BrowserUnavailableError,
    WebDriverException,
    UnicodeError,
    LookupError,
)


@dataclass
class FetchAttempt:
    """Result of one strategy.

    ``degraded`` marks text that was fetched but looks corrupted or
    truncated; it is only returned by the ``degraded`` strategy.
    """

    strategy: str
    html: Optional[str] = None
    error: Optional[str] = None
    degraded: bool = False

    @property
    def ok(self) -> bool:
        return self.html is not None and not self.degraded and self.error is None


@dataclass
class FetchContext:
    url: str
    organization: Optional[OrganizationConfig] = None
    attempts: list[FetchAttempt] = field(default_factory=list)
    browser_unavailable: bool = False

    @property
    def encoding_sensitive(self) -> bool:
        return bool(self.organization and self.organization.encoding_sensitive)

    def has_degraded(self, strategy: Optional[str] = None) -> bool:
        return any(
            a.degraded and a.html and (strategy is None or a.strategy == strategy)
            for a in self.attempts
        )

    def best_degraded_html(self) -> Optional[str]:
        """Degraded text with the fewest replacement characters."""
        candidates = [a.html for a in self.attempts if a.degraded and a.html]
        if not candidates:
            return None
        return min(candidates, key=replacement_ratio)


class FetchStrategy:
    """One step of the acquisition chain."""

    name = "strategy"

    def applies(self, fetcher: "ContentFetcher", context: FetchContext) -> bool:
        return True

    def fetch(self, fetcher: "ContentFetcher", context: FetchContext) -> FetchAttempt:
        raise NotImplementedError


class AutomationStrategy(FetchStrategy):
    name = "automation"

    def applies(self, fetcher, context):
        return bool(context.organization and context.organization.use_selenium)

    def fetch(self, fetcher, context):
        html = fetcher.automation.fetch_rendered(context.url)
        return FetchAttempt(self.name, html=html)


class HttpStrategy(FetchStrategy):
    name = "http"

    def fetch(self, fetcher, context):
        response = fetcher.get(context.url, context.organization)
        text = fetcher.decode(response, context.organization)
        problem = fetcher.assess(text, context.organization)
        if problem:
            logger.info(f"Plain GET of {context.url} unusable: {problem}")
            return FetchAttempt(self.name, html=text, error=problem, degraded=True)
        return FetchAttempt(self.name, html=text)


class LegacyEncodingStrategy(FetchStrategy):
    name = "legacy_encoding"

    def __init__(self, encodings: Sequence[str] = LEGACY_ENCODINGS):
        self.encodings = tuple(encodings)

    def applies(self, fetcher, context):
        return context.encoding_sensitive or context.has_degraded("http")

    def candidates(self, organization: Optional[OrganizationConfig]) -> list[str]:
        encodings = list(self.encodings)
        if organization is not None and organization.encoding:
            hint = organization.encoding
            encodings = [hint] + [e for e in encodings if e != hint]
        return encodings

    def fetch(self, fetcher, context):
        response = fetcher.get(context.url, context.organization)
        raw = response.content or b""

        for encoding in self.candidates(context.organization):
            text = raw.decode(encoding, errors="replace")
            if "\ufffd" in text:
                logger.debug(f"{encoding} decode of {context.url} has replacement chars")
                continue
            problem = fetcher.assess(text, context.organization)
            if problem:
                logger.debug(f"{encoding} decode of {context.url} unusable: {problem}")
                continue
            logger.info(f"Decoded {context.url} as {encoding}: {len(text)} chars")
            return FetchAttempt(self.name, html=text)

        # Keep the UTF-8 rendition so a browser-less host still has something
        text = raw.decode("utf-8", errors="replace")
        return FetchAttempt(
            self.name,
            html=text,
            error=f"no legacy encoding decoded cleanly ({', '.join(self.encodings)})",
            degraded=True,
        )


class BrowserRenderStrategy(FetchStrategy):
    name = "browser_render"

    def fetch(self, fetcher, context):
        attempts = 1
        if context.organization and context.organization.flaky:
            attempts = fetcher.settings.navigation_attempts
        try:
            html = fetcher.renderer.render(context.url, attempts=attempts)
        except BrowserUnavailableError:
            context.browser_unavailable = True
            raise
        problem = fetcher.assess(html, context.organization)
        if problem:
            return FetchAttempt(self.name, html=html, error=problem, degraded=True)
        return FetchAttempt(self.name, html=html)


class DegradedStrategy(FetchStrategy):
    name = "degraded"

    def applies(self, fetcher, context):
        return (context.browser_unavailable or not fetcher.renderer.available) and (
            context.has_degraded()
        )

    def fetch(self, fetcher, context):
        html = context.best_degraded_html()
        logger.warning(
            f"No browser engine available; using degraded content for {context.url} "
            f"(replacement ratio {replacement_ratio(html or ''):.2%})"
        )
        return FetchAttempt(self.name, html=html)


DEFAULT_STRATEGIES: tuple[FetchStrategy, ...] = (
    AutomationStrategy(),
    HttpStrategy(),
    LegacyEncodingStrategy(),
    BrowserRenderStrategy(),
    DegradedStrategy(),
)


class ContentFetcher:
    """Fetches listing HTML and owns the browser engines for a batch."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        renderer: Optional[BrowserRenderer] = None,
        automation: Optional[AutomationSession] = None,
        strategies: Optional[Sequence[FetchStrategy]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings or get_settings()
        self.session = session if session is not None else self._create_session()
        self.renderer = renderer or BrowserRenderer(self.settings, sleep=sleep)
        self.automation = automation or AutomationSession(self.settings, sleep=sleep)
        self.strategies = tuple(strategies or DEFAULT_STRATEGIES)

    def _create_session(self) -> requests.Session:
        # cloudscraper returns a requests.Session subclass
        session = cloudscraper.create_scraper()
        session.headers.update(
            {
                "User-Agent": self.settings.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "ja,en-US;q=0.7,en;q=0.3",
            }
        )
        logger.debug("Created cloudscraper session for listing fetches")
        return session

    def timeout_for(self, organization: Optional[OrganizationConfig]) -> float:
        if organization is not None and organization.encoding_sensitive:
            return self.settings.encoding_request_timeout
        return self.settings.request_timeout

    def get(
        self, url: str, organization: Optional[OrganizationConfig] = None
    ) -> requests.Response:
        response = self.session.get(url, timeout=self.timeout_for(organization))
        response.raise_for_status()
        return response

    def decode(
        self, response: requests.Response, organization: Optional[OrganizationConfig]
    ) -> str:
        """Decode a listing body, trusting a known site encoding over the headers."""
        raw = response.content or b""
        if organization is not None and organization.encoding:
            return raw.decode(organization.encoding, errors="replace")
        if "charset" not in response.headers.get("Content-Type", "").lower():
            # requests falls back to ISO-8859-1 for text/html without a charset
            return raw.decode("utf-8", errors="replace")
        return response.text

    def assess(self, text: Optional[str], organization: Optional[OrganizationConfig]) -> Optional[str]:
        """Return why ``text`` is unusable, or None when it looks fine."""
        if not text or not text.strip():
            return "empty document"
        if (
            organization is not None
            and organization.encoding_sensitive
            and len(text) < self.settings.min_html_length
        ):
            return f"document too short ({len(text)} chars)"
        ratio = replacement_ratio(text)
        if ratio >= self.settings.corruption_threshold:
            return f"{ratio:.1%} replacement characters"
        return None

    def fetch_page_content(
        self, url: str, organization: Optional[OrganizationConfig] = None
    ) -> Optional[str]:
        """Return listing HTML, or None when every strategy failed."""
        context = FetchContext(url=url, organization=organization)

        for strategy in self.strategies:
            if not strategy.applies(self, context):
                continue
            try:
                attempt = strategy.fetch(self, context)
            except RECOVERABLE_FETCH_ERRORS as e:
                logger.warning(f"{strategy.name} fetch failed for {url}: {e}")
                attempt = FetchAttempt(strategy.name, error=str(e))

            context.attempts.append(attempt)
            if attempt.ok:
                logger.info(
                    f"Fetched {url} via {strategy.name}: {len(attempt.html or '')} chars"
                )
                return attempt.html

        tried = ", ".join(f"{a.strategy}: {a.error}" for a in context.attempts)
        logger.error(f"All fetch strategies failed for {url} ({tried})")
        return None

    def close(self) -> None:
        """Release browser engines; never raises."""
        self.renderer.release()
        self.automation.release()

    def __enter__(self) -> "ContentFetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

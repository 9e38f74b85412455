"""Browser engines owned by the content fetcher.

Two long-lived handles exist per batch:

- ``BrowserRenderer``: local headless Chrome used as the render fallback
  when plain HTTP and legacy decoding did not produce usable markup.
- ``AutomationSession``: a WebDriver session (remote when
  ``SELENIUM_REMOTE_URL`` is set, local otherwise) for listings that only
  appear after client-side rendering or that need click-through.

Both are created lazily on first use, reused across organizations and
must be released explicitly; ``release()`` never raises.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from ..config import Settings
from .errors import BrowserUnavailableError, FetchError

logger = logging.getLogger(__name__)

DriverFactory = Callable[[], WebDriver]


def build_chrome_options(settings: Settings, page_load_strategy: str = "normal"):
    """Chrome options tuned for container hosts."""
    chrome_options = ChromeOptions()
    chrome_options.page_load_strategy = page_load_strategy

    chrome_options.add_argument("--headless=new")
    chrome_options.add_argument("--no-sandbox")
    chrome_options.add_argument("--disable-setuid-sandbox")
    chrome_options.add_argument("--disable-dev-shm-usage")
    chrome_options.add_argument("--disable-gpu")
    chrome_options.add_argument("--disable-extensions")
    chrome_options.add_argument("--disable-blink-features=AutomationControlled")
    chrome_options.add_argument("--disable-background-timer-throttling")
    chrome_options.add_argument("--disable-backgrounding-occluded-windows")
    chrome_options.add_argument("--disable-renderer-backgrounding")
    chrome_options.add_argument("--no-first-run")
    chrome_options.add_argument("--no-default-browser-check")
    chrome_options.add_argument("--mute-audio")
    chrome_options.add_argument("--window-size=1280,720")
    chrome_options.add_argument("--lang=ja-JP")
    chrome_options.add_argument(f"--user-agent={settings.user_agent}")

    chrome_options.add_experimental_option("excludeSwitches", ["enable-automation"])
    chrome_options.add_experimental_option("useAutomationExtension", False)

    if settings.chrome_bin:
        chrome_options.binary_location = str(settings.chrome_bin)

    return chrome_options


def create_chrome_driver(
    settings: Settings,
    page_load_strategy: str = "normal",
    remote_url: Optional[str] = None,
) -> WebDriver:
    """Start a local or remote Chrome WebDriver."""
    options = build_chrome_options(settings, page_load_strategy)

    if remote_url:
        driver = webdriver.Remote(command_executor=remote_url, options=options)
    elif settings.chromedriver_path:
        service = ChromeService(executable_path=str(settings.chromedriver_path))
        driver = webdriver.Chrome(service=service, options=options)
    else:
        driver = webdriver.Chrome(options=options)

    driver.set_page_load_timeout(settings.page_load_timeout)

    try:
        driver.execute_script(
            "Object.defineProperty(navigator, 'webdriver', {get: () => undefined})"
        )
    except WebDriverException as e:
        logger.debug(f"webdriver flag override failed (non-fatal): {e}")

    return driver


class _ManagedDriver:
    """Lazily created WebDriver with a sticky launch failure."""

    engine_name = "browser"

    def __init__(
        self,
        settings: Settings,
        driver_factory: Optional[DriverFactory] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self._driver_factory = driver_factory or self._default_factory
        self._sleep = sleep
        self._driver: Optional[WebDriver] = None
        self._launch_failed = False
        self._launch_error: Optional[str] = None
        self.use_count = 0

    def _default_factory(self) -> WebDriver:
        raise NotImplementedError

    @property
    def available(self) -> bool:
        """False once a launch attempt has failed in this batch."""
        return not self._launch_failed

    @property
    def is_running(self) -> bool:
        return self._driver is not None

    def acquire(self) -> WebDriver:
        """Return the shared driver, starting it on first use."""
        if self._driver is not None:
            self.use_count += 1
            return self._driver

        if self._launch_failed:
            raise BrowserUnavailableError(
                f"{self.engine_name} unavailable: {self._launch_error}"
            )

        logger.info(f"Starting {self.engine_name}")
        try:
            self._driver = self._driver_factory()
        except Exception as e:
            self._launch_failed = True
            self._launch_error = str(e)
            logger.error(f"Failed to start {self.engine_name}: {e}")
            raise BrowserUnavailableError(
                f"{self.engine_name} unavailable: {e}"
            ) from e

        self.use_count = 1
        logger.info(f"{self.engine_name} started")
        return self._driver

    def release(self) -> None:
        """Quit the driver; errors are logged and never raised."""
        if self._driver is None:
            return
        try:
            logger.info(f"Closing {self.engine_name} after {self.use_count} uses")
            self._driver.quit()
        except Exception as e:
            logger.warning(f"Error closing {self.engine_name}: {e}")
        finally:
            self._driver = None
            self.use_count = 0

    def _wait_for_body(self, driver: WebDriver, timeout: float) -> None:
        WebDriverWait(driver, timeout).until(
            EC.presence_of_element_located((By.TAG_NAME, "body"))
        )


class BrowserRenderer(_ManagedDriver):
    """Local headless Chrome used to render listing pages."""

    engine_name = "headless browser"

    def _default_factory(self) -> WebDriver:
        # Stop waiting once the DOM is interactive
        return create_chrome_driver(self.settings, page_load_strategy="eager")

    def render(self, url: str, attempts: int = 1, backoff: Optional[float] = None) -> str:
        """Navigate to ``url`` and return the rendered document.

        Navigation is retried ``attempts`` times, sleeping ``backoff * n``
        seconds after the n-th failure.

        Raises:
            BrowserUnavailableError: the browser could not be started
            FetchError: every navigation attempt failed
        """
        driver = self.acquire()
        backoff = self.settings.navigation_backoff if backoff is None else backoff
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                logger.debug(f"Rendering {url} (attempt {attempt}/{attempts})")
                driver.get(url)
                self._wait_for_body(driver, self.settings.page_load_timeout)
                html = driver.page_source
                logger.info(f"Rendered {url}: {len(html)} chars")
                return html
            except (TimeoutException, WebDriverException) as e:
                last_error = e
                logger.warning(f"Render attempt {attempt}/{attempts} failed for {url}: {e}")
                if attempt < attempts:
                    self._sleep(backoff * attempt)

        raise FetchError(f"Render failed after {attempts} attempts: {last_error}")


class AutomationSession(_ManagedDriver):
    """WebDriver session for listings that need a live browser."""

    engine_name = "automation session"

    def _default_factory(self) -> WebDriver:
        return create_chrome_driver(
            self.settings, remote_url=self.settings.selenium_remote_url
        )

    def load(self, url: str, settle: Optional[float] = None) -> WebDriver:
        """Open ``url``, wait for the body and let client scripts settle."""
        driver = self.acquire()
        driver.get(url)
        self._wait_for_body(driver, 10)
        self._sleep(self.settings.render_settle_seconds if settle is None else settle)
        return driver

    def fetch_rendered(self, url: str) -> str:
        """Return the fully rendered document for ``url``."""
        try:
            driver = self.load(url)
            html = driver.page_source
        except (TimeoutException, WebDriverException) as e:
            raise FetchError(f"Automation render failed for {url}: {e}") from e
        logger.info(f"Automation session rendered {url}: {len(html)} chars")
        return html

    def click_through(
        self,
        listing_url: str,
        block_selector: str,
        fingerprint: Callable[[str], str],
        max_blocks: int = 10,
        click_settle: float = 2.0,
    ) -> dict[str, str]:
        """Click each article block and record where it navigates.

        Blocks are located again on every iteration because navigating
        away invalidates element references. A failing block reloads the
        listing and iteration continues with the next one.

        Returns:
            Mapping of block fingerprint to detail URL (may be partial)
        """
        detail_urls: dict[str, str] = {}
        try:
            driver = self.load(listing_url)
        except (TimeoutException, WebDriverException) as e:
            logger.error(f"Could not open listing {listing_url}: {e}")
            return detail_urls

        for index in range(max_blocks):
            try:
                blocks = driver.find_elements(By.CSS_SELECTOR, block_selector)
                if len(blocks) <= index:
                    logger.debug(f"No block #{index + 1} on {listing_url}; stopping")
                    break

                block = blocks[index]
                key = fingerprint(block.text)
                if not key:
                    logger.debug(f"Block #{index + 1} has no text to match on; skipping")
                    continue
                block.click()
                self._sleep(click_settle)

                current = driver.current_url
                if current.rstrip("/") != listing_url.rstrip("/"):
                    detail_urls[key] = current
                    logger.debug(f"Block #{index + 1} {key!r} -> {current}")

                driver = self.load(listing_url, settle=click_settle)
            except (TimeoutException, WebDriverException) as e:
                logger.warning(f"Click-through failed for block #{index + 1}: {e}")
                try:
                    driver = self.load(listing_url, settle=click_settle)
                except (TimeoutException, WebDriverException) as back_error:
                    logger.error(f"Could not return to {listing_url}: {back_error}")

        logger.info(f"Click-through on {listing_url} found {len(detail_urls)} URLs")
        return detail_urls

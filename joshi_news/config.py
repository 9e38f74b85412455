"""Runtime settings loaded from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/129.0.0.0 Safari/537.36"
)

_TRUTHY = ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        logger.warning(f"Invalid value for {name}; using default {default}")
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        logger.warning(f"Invalid value for {name}; using default {default}")
        return default


@dataclass
class Settings:
    """Configuration for the collector, storage and browser engines."""

    data_dir: Path
    storage_backend: str = "json"
    database_url: Optional[str] = None
    retention_limit: int = 100

    user_agent: str = DEFAULT_USER_AGENT
    request_timeout: float = 10.0
    encoding_request_timeout: float = 20.0
    min_html_length: int = 1000
    corruption_threshold: float = 0.01

    inter_org_delay: float = 2.0
    render_settle_seconds: float = 3.0
    navigation_attempts: int = 3
    navigation_backoff: float = 2.0
    page_load_timeout: int = 30

    chrome_bin: Optional[str] = None
    chromedriver_path: Optional[str] = None
    selenium_remote_url: Optional[str] = None

    constrained_runtime: bool = False
    timezone: str = "Asia/Tokyo"
    collect_interval_seconds: int = 3600

    @classmethod
    def from_env(cls) -> "Settings":
        data_dir = Path(
            os.getenv("NEWS_DATA_DIR") or os.getenv("TEMP") or "/tmp"
        )
        constrained = os.getenv("NEWS_CONSTRAINED_RUNTIME", "").lower() in _TRUTHY
        # Azure Functions workers export this; treat them as constrained hosts
        if os.getenv("FUNCTIONS_WORKER_RUNTIME"):
            constrained = True

        return cls(
            data_dir=data_dir,
            storage_backend=os.getenv("NEWS_STORAGE_BACKEND", "json").lower(),
            database_url=os.getenv("DATABASE_URL") or None,
            retention_limit=_env_int("NEWS_RETENTION_LIMIT", 100),
            user_agent=os.getenv("NEWS_USER_AGENT") or DEFAULT_USER_AGENT,
            request_timeout=_env_float("REQUEST_TIMEOUT", 10.0),
            encoding_request_timeout=_env_float("ENCODING_REQUEST_TIMEOUT", 20.0),
            inter_org_delay=_env_float("INTER_ORG_DELAY", 2.0),
            render_settle_seconds=_env_float("RENDER_SETTLE_SECONDS", 3.0),
            chrome_bin=os.getenv("CHROME_BIN") or os.getenv("GOOGLE_CHROME_BIN"),
            chromedriver_path=os.getenv("CHROMEDRIVER_PATH") or None,
            selenium_remote_url=os.getenv("SELENIUM_REMOTE_URL") or None,
            constrained_runtime=constrained,
            timezone=os.getenv("NEWS_TIMEZONE", "Asia/Tokyo"),
            collect_interval_seconds=_env_int("COLLECT_INTERVAL_SECONDS", 3600),
        )

    @property
    def news_file(self) -> Path:
        return self.data_dir / "news-data.json"

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_dir / 'news.db'}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide settings (read once from the environment)."""
    return Settings.from_env()

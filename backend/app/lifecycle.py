"""FastAPI lifecycle management for the news storage backend.

The storage handle is created once at startup and stored on
``app.state.news_storage``; tests can pre-populate it to inject a fake.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request

from joshi_news.config import get_settings
from joshi_news.storage import NewsStorage, get_storage

logger = logging.getLogger(__name__)


async def startup_resources(app: FastAPI) -> None:
    """Create shared resources unless they were provided up front."""
    logger.info("Starting resource initialization...")

    try:
        if getattr(app.state, "news_storage", None) is None:
            settings = get_settings()
            app.state.news_storage = get_storage(settings)
            logger.info(f"News storage initialized ({settings.storage_backend})")
        else:
            logger.info("News storage already provided on app.state; skipping init")
    except Exception as exc:
        logger.exception("Failed to initialize news storage", exc_info=exc)
        # Endpoints report the failure per request
        app.state.news_storage = None

    app.state.ready = True
    logger.info("All resources initialized, app is ready")


async def shutdown_resources(app: FastAPI) -> None:
    logger.info("Starting resource cleanup...")

    storage = getattr(app.state, "news_storage", None)
    close = getattr(storage, "close", None)
    if callable(close):
        try:
            close()
            logger.info("News storage closed")
        except Exception as exc:
            logger.exception("Error closing news storage", exc_info=exc)

    if hasattr(app.state, "ready"):
        app.state.ready = False
    logger.info("Resource cleanup complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await startup_resources(app)
    yield
    await shutdown_resources(app)


def get_news_storage(request: Request) -> Optional[NewsStorage]:
    """Dependency that provides the shared storage (None if startup failed)."""
    return getattr(request.app.state, "news_storage", None)


def is_ready(request: Request) -> bool:
    return getattr(request.app.state, "ready", False)

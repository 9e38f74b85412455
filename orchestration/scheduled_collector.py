#!/usr/bin/env python3
"""Scheduled collector that re-runs the news batch on a fixed interval.

Each cycle scrapes every organization once and merges the results into
storage. A failing cycle is logged and the loop keeps going; only an
interrupt stops it.
"""

from __future__ import annotations

import argparse
import logging
import time
from typing import Callable, Optional

from joshi_news.config import get_settings
from joshi_news.crawler.collector import news_collector

# In containerized environments the platform adds timestamps.
logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def run_cycle(collector: Callable = news_collector) -> bool:
    """Run one batch; return False when it raised."""
    try:
        batch = collector()
    except Exception as exc:
        logger.exception("💥 Collection cycle failed: %s", exc)
        return False

    logger.info(
        "✅ Cycle collected %d items (%d ok, %d failed)",
        batch.collected,
        len(batch.succeeded),
        len(batch.failed),
    )
    return True


def main(
    argv: Optional[list[str]] = None,
    collector: Callable = news_collector,
    sleep: Callable[[float], None] = time.sleep,
    max_cycles: Optional[int] = None,
) -> int:
    parser = argparse.ArgumentParser(description="Run the news collector on an interval")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Seconds between cycles (default COLLECT_INTERVAL_SECONDS)",
    )
    args = parser.parse_args(argv)

    interval = args.interval or get_settings().collect_interval_seconds
    if args.once:
        return 0 if run_cycle(collector) else 1

    logger.info("🚀 Starting scheduled collector (interval %d seconds)", interval)
    cycle_count = 0
    while max_cycles is None or cycle_count < max_cycles:
        cycle_count += 1
        logger.info("=" * 60)
        logger.info("Collection cycle #%d", cycle_count)
        try:
            run_cycle(collector)
            if max_cycles is not None and cycle_count >= max_cycles:
                break
            logger.info("⏸️  Sleeping for %d seconds", interval)
            sleep(interval)
        except KeyboardInterrupt:
            logger.info("⏹️  Received interrupt signal, shutting down")
            break
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Run one collection batch over every organization."""

from __future__ import annotations

import argparse
import logging

from ...crawler.collector import news_collector
from ...organizations import ORGANIZATIONS, get_organization

logger = logging.getLogger(__name__)


def add_collect_parser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "collect", help="Scrape every organization and store the results"
    )
    parser.add_argument(
        "--org",
        action="append",
        dest="orgs",
        default=None,
        help="Limit the batch to these organizations (repeatable)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to wait between organizations (default from settings)",
    )
    parser.set_defaults(func=handle_collect_command)
    return parser


def handle_collect_command(args) -> int:
    organizations = ORGANIZATIONS
    if args.orgs:
        selected = [get_organization(name) for name in args.orgs]
        unknown = [name for name, org in zip(args.orgs, selected) if org is None]
        if unknown:
            print(f"❌ Unknown organization(s): {', '.join(unknown)}")
            return 1
        organizations = tuple(selected)

    try:
        batch = news_collector(organizations=organizations, delay=args.delay)
    except Exception as e:
        logger.exception("Collection batch failed")
        print(f"❌ Collection failed: {e}")
        return 1

    print()
    print("📰 Collection summary")
    print("=" * 50)
    print(f"  Collected: {batch.collected}")
    print(f"  Succeeded: {len(batch.succeeded)}")
    print(f"  Failed: {len(batch.failed)}")
    for organization, error in batch.errors.items():
        print(f"    - {organization}: {error}")
    if batch.statistics:
        print(f"  Stored total: {batch.statistics['total']}")
    print()
    return 0

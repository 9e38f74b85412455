"""List stored news."""

from __future__ import annotations

import argparse
import logging

from ...storage import get_storage

logger = logging.getLogger(__name__)


def add_news_parser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    parser = subparsers.add_parser("news", help="List stored news")
    parser.add_argument("--org", default=None, help="Only this organization")
    parser.add_argument("--limit", type=int, default=20, help="Maximum items to show")
    parser.set_defaults(func=handle_news_command)
    return parser


def handle_news_command(args) -> int:
    try:
        storage = get_storage()
        if args.org:
            items = storage.load_by_organization(args.org)[: args.limit]
        else:
            items = storage.load_latest(args.limit)
    except Exception as e:
        logger.exception("Failed to load news")
        print(f"❌ Could not load news: {e}")
        return 1

    if not items:
        print("No stored news")
        return 0

    for item in items:
        print(f"{item.published_at:%Y-%m-%d}  [{item.organization}] {item.title}")
        print(f"            {item.detail_url}")
    return 0

"""Show storage statistics."""

from __future__ import annotations

import argparse
import logging

from ...storage import get_storage

logger = logging.getLogger(__name__)


def add_stats_parser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    parser = subparsers.add_parser("stats", help="Show storage statistics")
    parser.set_defaults(func=handle_stats_command)
    return parser


def handle_stats_command(args) -> int:
    try:
        stats = get_storage().statistics()
    except Exception as e:
        logger.exception("Failed to compute statistics")
        print(f"❌ Could not read statistics: {e}")
        return 1

    print(f"Total: {stats['total']}")
    print(f"Latest update: {stats['latest_update'] or '-'}")
    for organization, count in sorted(stats["by_organization"].items()):
        print(f"  {organization:<14} {count}")
    return 0

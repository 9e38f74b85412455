"""Delete every stored news record."""

from __future__ import annotations

import argparse
import logging

from ...storage import get_storage

logger = logging.getLogger(__name__)


def add_clear_parser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    parser = subparsers.add_parser("clear", help="Delete all stored news")
    parser.add_argument(
        "--yes",
        action="store_true",
        default=False,
        help="Confirm deletion",
    )
    parser.set_defaults(func=handle_clear_command)
    return parser


def handle_clear_command(args) -> int:
    if not args.yes:
        print("Refusing to clear storage without --yes")
        return 1
    try:
        get_storage().clear()
    except Exception as e:
        logger.exception("Failed to clear storage")
        print(f"❌ Could not clear storage: {e}")
        return 1
    print("🧹 Cleared all stored news")
    return 0

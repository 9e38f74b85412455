"""CLI entry point with lazily loaded command modules."""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from collections.abc import Callable

logger = logging.getLogger(__name__)

CommandHandler = Callable[[argparse.Namespace], int]

# command name -> module under joshi_news.cli.commands
COMMAND_MODULES: dict[str, str] = {
    "collect": "collect",
    "scrape": "scrape",
    "news": "news",
    "stats": "stats",
    "clear": "clear",
    "seed": "seed",
}

COMMAND_HANDLER_ATTRS: dict[str, str] = {
    "collect": "handle_collect_command",
    "scrape": "handle_scrape_command",
    "news": "handle_news_command",
    "stats": "handle_stats_command",
    "clear": "handle_clear_command",
    "seed": "handle_seed_command",
}


def create_parser() -> argparse.ArgumentParser:
    """Minimal parser; command arguments are loaded on demand."""
    parser = argparse.ArgumentParser(
        prog="joshi-news",
        description="Joshi news collector - scrape and serve promotion news",
        add_help=False,
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. INFO, DEBUG)",
    )
    parser.add_argument(
        "command",
        nargs="?",
        help="Command to run (use 'COMMAND --help' for command-specific help)",
    )
    return parser


def _load_command_parser(command: str) -> tuple[Callable, CommandHandler] | None:
    """Return (add_parser_func, handler) for ``command`` or None."""
    module_name = COMMAND_MODULES.get(command)
    if not module_name:
        return None

    try:
        module = importlib.import_module(f"joshi_news.cli.commands.{module_name}")
    except ImportError as e:
        logger.warning(f"Failed to load command '{command}': {e}")
        return None

    parser_func = getattr(module, f"add_{command}_parser", None)
    handler_func = getattr(module, COMMAND_HANDLER_ATTRS[command], None)
    if parser_func and handler_func:
        return parser_func, handler_func
    return None


def _print_usage() -> None:
    print("Available commands:", file=sys.stderr)
    print("  collect  - Scrape every organization and store the results")
    print("  scrape   - Scrape one organization without storing")
    print("  news     - List stored news")
    print("  stats    - Show storage statistics")
    print("  clear    - Delete all stored news")
    print("  seed     - Store sample news for local development")
    print("Use: joshi-news COMMAND --help for more info")


def main(
    argv: list[str] | None = None,
    *,
    setup_logging_func: Callable[[str], None] | None = None,
    handler_overrides: dict[str, CommandHandler] | None = None,
) -> int:
    parser = create_parser()
    args, remaining = parser.parse_known_args(argv)

    log_level = getattr(args, "log_level", "INFO") or "INFO"
    if setup_logging_func is None:
        from .context import setup_logging as setup_logging_func
    setup_logging_func(log_level)

    command = args.command
    if not command:
        _print_usage()
        return 1

    result = _load_command_parser(command)
    if result is None:
        print(f"Unknown command: {command}", file=sys.stderr)
        return 1
    add_parser_func, handle_func = result

    full_parser = argparse.ArgumentParser(prog="joshi-news")
    full_parser.add_argument("--log-level", default="INFO")
    subparsers = full_parser.add_subparsers(dest="command")
    add_parser_func(subparsers)
    full_args = full_parser.parse_args([command] + remaining)

    if handler_overrides and command in handler_overrides:
        return handler_overrides[command](full_args)
    return handle_func(full_args)


if __name__ == "__main__":
    sys.exit(main())

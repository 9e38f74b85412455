"""Scrape a single organization without touching storage."""

from __future__ import annotations

import argparse
import json

from ...crawler import NewsScraper
from ...organizations import get_organization


def add_scrape_parser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "scrape", help="Scrape one organization and print the items"
    )
    parser.add_argument("--org", required=True, help="Organization name (e.g. stardom)")
    parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        default=False,
        help="Print items as JSON",
    )
    parser.set_defaults(func=handle_scrape_command)
    return parser


def handle_scrape_command(args) -> int:
    organization = get_organization(args.org)
    if organization is None:
        print(f"❌ Unknown organization: {args.org}")
        return 1

    with NewsScraper() as scraper:
        result = scraper.scrape_news(organization)

    if args.as_json:
        print(
            json.dumps(
                {
                    "success": result.success,
                    "organization": result.organization,
                    "error": result.error,
                    "items": [item.to_dict() for item in result.news_items],
                },
                ensure_ascii=False,
                indent=2,
            )
        )
    else:
        status = "✅" if result.success else "❌"
        print(f"{status} {organization.display_name}: {len(result.news_items)} items")
        if result.error:
            print(f"   {result.error}")
        for item in result.news_items:
            print(f"  {item.published_at:%Y-%m-%d}  {item.title}")
            print(f"              {item.detail_url}")

    return 0 if result.success else 1

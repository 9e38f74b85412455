"""Store a handful of sample records for local frontend work."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime

from ...models import NewsItem
from ...storage import get_storage

logger = logging.getLogger(__name__)

SAMPLE_NEWS: tuple[NewsItem, ...] = (
    NewsItem(
        id="test-stardom-001",
        title="【スターダム】新春大興行 2025.1.4 後楽園ホール大会結果",
        summary="後楽園ホールにて新春大興行が開催され、白熱した試合が繰り広げられました。",
        thumbnail="https://wwr-stardom.com/wp-content/uploads/2024/12/news-sample.jpg",
        published_at=datetime.fromisoformat("2025-01-04T19:00:00+09:00"),
        detail_url="https://wwr-stardom.com/news/2025/01/04/new-year-event/",
        organization="stardom",
        source_url="https://wwr-stardom.com/news/",
    ),
    NewsItem(
        id="test-tjpw-001",
        title="【東京女子プロレス】新年会大会 1月5日 品川プリンスホテル",
        summary="東京女子プロレス新年会大会が品川プリンスホテルで開催されます。",
        thumbnail="https://www.tjpw.jp/images/news/sample-image.jpg",
        published_at=datetime.fromisoformat("2025-01-03T15:30:00+09:00"),
        detail_url="https://www.tjpw.jp/news/2025/01/03/new-year-party/",
        organization="tjpw",
        source_url="https://www.tjpw.jp/news",
    ),
    NewsItem(
        id="test-ice-ribbon-001",
        title="【アイスリボン】1月定期興行 Ice Ribbon #1400",
        summary="Ice Ribbon第1400戦記念大会が開催されます。",
        thumbnail="https://iceribbon.com/images/news/1400th-match.jpg",
        published_at=datetime.fromisoformat("2025-01-02T20:15:00+09:00"),
        detail_url="https://iceribbon.com/news/2025/01/02/1400th-match/",
        organization="ice_ribbon",
        source_url="https://iceribbon.com/news_list.php",
    ),
    NewsItem(
        id="test-wave-001",
        title="【WAVE】新年興行「New Wave 2025」開催決定",
        summary="プロレスリングWAVEの新年興行が決定しました。",
        thumbnail="https://pro-w-wave.com/images/new-wave-2025.jpg",
        published_at=datetime.fromisoformat("2025-01-01T12:00:00+09:00"),
        detail_url="https://pro-w-wave.com/news/2025/01/01/new-wave-2025/",
        organization="wave",
        source_url="https://pro-w-wave.com/",
    ),
)


def add_seed_parser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    parser = subparsers.add_parser("seed", help="Store sample news records")
    parser.set_defaults(func=handle_seed_command)
    return parser


def handle_seed_command(args) -> int:
    try:
        storage = get_storage()
        storage.save(list(SAMPLE_NEWS))
        stats = storage.statistics()
    except Exception as e:
        logger.exception("Failed to seed storage")
        print(f"❌ Could not seed storage: {e}")
        return 1

    print(f"🌱 Added {len(SAMPLE_NEWS)} sample items ({stats['total']} stored)")
    return 0

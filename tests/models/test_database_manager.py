"""DatabaseManager and record mapping coverage tests."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from joshi_news.models import NewsItem, NewsItemRecord
from joshi_news.models.database import DatabaseManager

JST = timezone(timedelta(hours=9))


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'models.db'}")
    yield manager
    manager.close()


def test_tables_created_on_init(db):
    with db.get_session() as session:
        assert list(session.scalars(select(NewsItemRecord))) == []


def test_context_manager_commits_on_success(tmp_path, make_item):
    url = f"sqlite:///{tmp_path / 'commit.db'}"
    with DatabaseManager(url) as db:
        db.session.add(NewsItemRecord.from_item(make_item("a1")))

    with DatabaseManager(url) as db:
        assert db.session.get(NewsItemRecord, "a1") is not None


def test_context_manager_rolls_back_on_error(tmp_path, make_item):
    url = f"sqlite:///{tmp_path / 'rollback.db'}"
    with pytest.raises(RuntimeError):
        with DatabaseManager(url) as db:
            db.session.add(NewsItemRecord.from_item(make_item("a1")))
            raise RuntimeError("abort")

    with DatabaseManager(url) as db:
        assert db.session.get(NewsItemRecord, "a1") is None


def test_record_stores_utc_and_restores_aware_datetime(db, make_item):
    item = make_item("a1", published_at=datetime(2025, 1, 10, 9, 0, tzinfo=JST))

    with db.get_session() as session:
        session.add(NewsItemRecord.from_item(item))
        session.commit()

    with db.get_session() as session:
        restored = session.get(NewsItemRecord, "a1").to_item()

    assert restored == item
    assert restored.published_at.tzinfo is not None


def test_news_item_dict_uses_camel_case_and_accepts_snake_case():
    data = {
        "id": "x",
        "title": "タイトル",
        "summary": None,
        "thumbnail": None,
        "published_at": "2025-01-10T00:00:00Z",
        "detail_url": "https://example.com/news/x",
        "organization": "wave",
        "source_url": "https://example.com/news",
    }

    item = NewsItem.from_dict(data)

    assert item.summary == ""
    assert item.published_at == datetime(2025, 1, 10, tzinfo=timezone.utc)
    assert item.to_dict()["detailUrl"] == "https://example.com/news/x"
    assert item.to_dict()["publishedAt"] == "2025-01-10T00:00:00+00:00"

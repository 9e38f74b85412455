"""SQL table storage through SQLAlchemy."""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import delete, func, select

from ..models import NewsItem, NewsItemRecord
from ..models.database import DatabaseManager
from . import compute_statistics

logger = logging.getLogger(__name__)


class SqlNewsStorage:
    """Stores news in the ``news_items`` table, newest ``limit`` rows kept."""

    def __init__(self, database_url: str, limit: int = 100, echo: bool = False):
        self.db = DatabaseManager(database_url, echo=echo)
        self.limit = limit

    def save(self, items: list[NewsItem]) -> None:
        with self.db.get_session() as session:
            try:
                added = 0
                pending: set[str] = set()
                for item in items:
                    if item.id in pending or session.get(NewsItemRecord, item.id) is not None:
                        continue
                    session.add(NewsItemRecord.from_item(item))
                    pending.add(item.id)
                    added += 1
                session.flush()

                expired = select(NewsItemRecord.id).order_by(
                    NewsItemRecord.published_at.desc()
                ).offset(self.limit)
                expired_ids = list(session.scalars(expired))
                if expired_ids:
                    session.execute(
                        delete(NewsItemRecord).where(NewsItemRecord.id.in_(expired_ids))
                    )
                session.commit()
            except Exception:
                session.rollback()
                raise

        logger.info(
            f"Saved {added} new items ({len(items) - added} already stored, "
            f"{len(expired_ids)} expired)"
        )

    def _load(self, organization: Optional[str] = None, limit: Optional[int] = None):
        query = select(NewsItemRecord).order_by(NewsItemRecord.published_at.desc())
        if organization:
            query = query.where(NewsItemRecord.organization == organization)
        if limit is not None:
            query = query.limit(limit)
        with self.db.get_session() as session:
            return [record.to_item() for record in session.scalars(query)]

    def load_latest(self, limit: int = 20) -> list[NewsItem]:
        return self._load(limit=limit)

    def load_by_organization(self, organization: Optional[str] = None) -> list[NewsItem]:
        return self._load(organization=organization)

    def statistics(self) -> dict[str, Any]:
        with self.db.get_session() as session:
            total = session.scalar(select(func.count()).select_from(NewsItemRecord)) or 0
            if not total:
                return compute_statistics([])
            rows = session.execute(
                select(NewsItemRecord.organization, func.count()).group_by(
                    NewsItemRecord.organization
                )
            ).all()
            latest = session.scalars(
                select(NewsItemRecord).order_by(NewsItemRecord.published_at.desc()).limit(1)
            ).first()

        return {
            "total": total,
            "by_organization": {organization: count for organization, count in rows},
            "latest_update": latest.to_item().published_at.isoformat() if latest else None,
        }

    def clear(self) -> None:
        with self.db.get_session() as session:
            session.execute(delete(NewsItemRecord))
            session.commit()
        logger.info("Cleared news_items table")

    def close(self) -> None:
        self.db.close()

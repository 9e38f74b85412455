"""Domain records and SQLAlchemy models for the news collector."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import Column, DateTime, String, Text, text
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

Base: Any = declarative_base()


@dataclass(frozen=True)
class SelectorSet:
    """CSS selectors used by the generic extractor."""

    news_items: str
    title: str = ""
    summary: str = ""
    thumbnail: str = ""
    published_at: str = ""
    detail_url: str = ""


@dataclass(frozen=True)
class OrganizationConfig:
    """Static description of one promotion's news listing."""

    name: str
    display_name: str
    base_url: str
    news_list_url: str
    selectors: SelectorSet
    # Listing only renders in a real browser session
    use_selenium: bool = False
    # Legacy encoding served by the site (e.g. Shift_JIS)
    encoding: Optional[str] = None
    # Navigation retries and degraded result in constrained runtimes
    flaky: bool = False

    @property
    def encoding_sensitive(self) -> bool:
        return self.encoding is not None


@dataclass
class Candidate:
    """Unvalidated record pulled out of listing markup."""

    title: str = ""
    summary: str = ""
    thumbnail: str = ""
    published_text: str = ""
    detail_url: str = ""


@dataclass
class NewsItem:
    """Normalized, persisted news record."""

    id: str
    title: str
    summary: str
    thumbnail: str
    published_at: datetime
    detail_url: str
    organization: str
    source_url: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase keys of the stored JSON format."""
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "thumbnail": self.thumbnail,
            "publishedAt": self.published_at.isoformat(),
            "detailUrl": self.detail_url,
            "organization": self.organization,
            "sourceUrl": self.source_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NewsItem":
        published = data.get("publishedAt") or data.get("published_at")
        if isinstance(published, str):
            published = datetime.fromisoformat(published.replace("Z", "+00:00"))
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            summary=data.get("summary") or "",
            thumbnail=data.get("thumbnail") or "",
            published_at=published,
            detail_url=data.get("detailUrl") or data.get("detail_url", ""),
            organization=data.get("organization", ""),
            source_url=data.get("sourceUrl") or data.get("source_url", ""),
        )


@dataclass
class ScrapingResult:
    """Outcome of scraping a single organization."""

    success: bool
    organization: str
    news_items: list[NewsItem] = field(default_factory=list)
    error: Optional[str] = None


class NewsItemRecord(Base):
    """Stored news item, keyed by its content-derived id."""

    __tablename__ = "news_items"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    organization = Column(String, nullable=False, index=True)
    title = Column(Text, nullable=False)
    summary = Column(Text, nullable=False, default="")
    thumbnail = Column(Text, nullable=False, default="")
    published_at = Column(DateTime(timezone=True), nullable=False, index=True)
    detail_url = Column(Text, nullable=False)
    source_url = Column(Text, nullable=False)
    created_at = Column(
        DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )

    @classmethod
    def from_item(cls, item: NewsItem) -> "NewsItemRecord":
        return cls(
            id=item.id,
            organization=item.organization,
            title=item.title,
            summary=item.summary,
            thumbnail=item.thumbnail,
            published_at=item.published_at.astimezone(timezone.utc),
            detail_url=item.detail_url,
            source_url=item.source_url,
        )

    def to_item(self) -> NewsItem:
        published = self.published_at
        # SQLite drops tzinfo; values are always written as UTC
        if published is not None and published.tzinfo is None:
            published = published.replace(tzinfo=timezone.utc)
        return NewsItem(
            id=self.id,
            title=self.title,
            summary=self.summary or "",
            thumbnail=self.thumbnail or "",
            published_at=published,
            detail_url=self.detail_url,
            organization=self.organization,
            source_url=self.source_url,
        )


__all__ = [
    "Base",
    "Candidate",
    "NewsItem",
    "NewsItemRecord",
    "OrganizationConfig",
    "ScrapingResult",
    "SelectorSet",
]

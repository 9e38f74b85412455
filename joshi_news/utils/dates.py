"""Normalize heterogeneous listing date strings into aware datetimes.

Listing pages print dates as ``2025/01/10``, ``2025.01.10``,
``2025年1月10日``, ``1月10日``, ``01/10`` or ISO timestamps. ``parse_date``
never raises: anything it cannot read becomes "now" and a warning is
logged, which keeps an article in the feed even when its date markup
changes.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, tzinfo
from typing import NamedTuple, Optional
from zoneinfo import ZoneInfo

from dateutil import parser as dateparser

from ..config import get_settings

logger = logging.getLogger(__name__)

MIN_YEAR = 2000
MAX_YEAR = 2050

_DISALLOWED_RE = re.compile(r"[^\d年月日/\-]")


class DatePattern(NamedTuple):
    """One entry of the ordered date pattern table.

    ``order`` names the meaning of the three (or two) captured groups:
    ``ymd``, ``mdy``, ``dmy`` or ``md`` (month/day in the current year).
    """

    name: str
    regex: re.Pattern
    order: str


DATE_PATTERNS: tuple[DatePattern, ...] = (
    DatePattern("year_month_day", re.compile(r"(\d{4})[-/](\d{1,2})[-/](\d{1,2})"), "ymd"),
    DatePattern("month_day_year", re.compile(r"(\d{1,2})[-/](\d{1,2})[-/](\d{4})"), "mdy"),
    DatePattern("day_month_year", re.compile(r"(\d{1,2})[-/](\d{1,2})[-/](\d{2,4})"), "dmy"),
    DatePattern("kanji_year_month_day", re.compile(r"(\d{4})年(\d{1,2})月(\d{1,2})日"), "ymd"),
    DatePattern("kanji_month_day", re.compile(r"(\d{1,2})月(\d{1,2})日"), "md"),
    DatePattern("slash_month_day", re.compile(r"(\d{1,2})/(\d{1,2})$"), "md"),
    DatePattern("compact_year_month_day", re.compile(r"(\d{4})(\d{2})(\d{2})"), "ymd"),
)


def _resolve_tz(tz: Optional[tzinfo]) -> tzinfo:
    if tz is not None:
        return tz
    return ZoneInfo(get_settings().timezone)


def clean_date_text(raw: str) -> str:
    """Drop everything except digits, 年月日 and date separators."""
    return _DISALLOWED_RE.sub("", raw).strip()


def _split_groups(pattern: DatePattern, groups: tuple[str, ...], current_year: int):
    numbers = [int(value) for value in groups]
    if pattern.order == "ymd":
        year, month, day = numbers
    elif pattern.order == "mdy":
        month, day, year = numbers
    elif pattern.order == "dmy":
        day, month, year = numbers
    else:
        month, day = numbers
        year = current_year
    if year < 100:
        year += 2000
    return year, month, day


def _match_pattern_table(cleaned: str, now: datetime) -> Optional[datetime]:
    for pattern in DATE_PATTERNS:
        match = pattern.regex.search(cleaned)
        if not match:
            continue

        year, month, day = _split_groups(pattern, match.groups(), now.year)
        if not (1 <= month <= 12 and 1 <= day <= 31 and MIN_YEAR <= year <= MAX_YEAR):
            continue

        try:
            parsed = datetime(year, month, day, tzinfo=now.tzinfo)
        except ValueError:
            # e.g. 2025/02/31 passes the range check but is not a real day
            logger.debug(f"Rejected impossible date {cleaned!r} ({pattern.name})")
            continue

        if pattern.order == "md" and parsed > now:
            try:
                parsed = parsed.replace(year=year - 1)
            except ValueError:
                continue
        return parsed
    return None


def _parse_free_text(raw: str, now: datetime) -> Optional[datetime]:
    try:
        parsed = dateparser.parse(raw)
    except (ValueError, OverflowError):
        return None
    if parsed is None or parsed.year < MIN_YEAR:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=now.tzinfo)
    return parsed


def parse_date(
    raw: Optional[str],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> datetime:
    """Parse listing date text; fall back to the current instant.

    Args:
        raw: Date text as it appears in the listing markup
        now: Reference instant (defaults to the current time in ``tz``)
        tz: Timezone for dates without an offset (defaults to settings)

    Returns:
        A timezone-aware datetime. Never raises.
    """
    zone = _resolve_tz(tz if now is None else (now.tzinfo or tz))
    now = now or datetime.now(zone)
    if now.tzinfo is None:
        now = now.replace(tzinfo=zone)

    if not raw or not raw.strip():
        return now

    parsed = _match_pattern_table(clean_date_text(raw), now)
    if parsed is not None:
        return parsed

    parsed = _parse_free_text(raw, now)
    if parsed is not None:
        return parsed

    logger.warning(f"Could not parse date {raw!r}; using current time")
    return now

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterator, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import DEFAULT_TIMEZONE, ISO_DATE_FORMAT

logger = logging.getLogger(__name__)

DateLike = Union[str, date, datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def format_iso_date(value: date) -> str:
    return value.strftime(ISO_DATE_FORMAT)


def get_timezone(name: Optional[str] = None) -> tzinfo:
    try:
        return ZoneInfo(name or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to %s", name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def today_in(tz: Optional[tzinfo] = None, *, now: Optional[datetime] = None) -> date:
    """Calendar date "today" in the institution timezone.

    Note: `now` lets tests pin the clock; aware values are converted to `tz`.
    """
    tz = tz or get_timezone()
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(tz).date()


def to_calendar_date(value, tz: Optional[tzinfo] = None) -> Optional[date]:
    """Normalize a date-like value to a calendar date, or None.

    Date-only values keep their own year/month/day. Aware datetimes are moved to
    `tz` before the calendar components are read, so a holiday stored as local
    midnight never shifts to the previous day.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None and tz is not None:
            value = value.astimezone(tz)
        return value.date()

    if isinstance(value, date):
        return value

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if len(text) == 10:
        try:
            return parse_iso_date(text)
        except ValueError:
            return None

    # Only "YYYY-MM-DD" followed by a time part; compact forms like "20240126" are rejected.
    if text[10:11] not in ("T", " "):
        return None
    try:
        parse_iso_date(text[:10])
    except ValueError:
        return None

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return to_calendar_date(parsed, tz)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)

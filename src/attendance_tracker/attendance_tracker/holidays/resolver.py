from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, tzinfo
from typing import Iterable, Optional

from ..common.datetime_utils import format_iso_date, to_calendar_date

logger = logging.getLogger(__name__)

_DATE_FIELDS = ("date", "holiday_date", "holidayDate")


def _extract_date(entry):
    # datetime has a .date() method, so plain values must short-circuit here.
    if isinstance(entry, (str, date)):
        return entry

    if isinstance(entry, Mapping):
        for field in _DATE_FIELDS:
            if entry.get(field) is not None:
                return entry[field]
        return None

    for field in _DATE_FIELDS:
        value = getattr(entry, field, None)
        if value is not None:
            return value
    return entry


def resolve_holiday_set(raw_holidays: Optional[Iterable], *, tz: Optional[tzinfo] = None) -> frozenset[str]:
    """Build the set of excluded calendar dates as YYYY-MM-DD strings.

    Entries may be strings, dates, datetimes, or mappings/objects carrying a
    `date`, `holiday_date` or `holidayDate` field. Callers pass active holidays
    only; soft-deleted rows are filtered by the repository.
    """
    resolved: set[str] = set()
    for entry in raw_holidays or ():
        day = to_calendar_date(_extract_date(entry), tz)
        if day is None:
            logger.warning("Dropping holiday entry with unusable date: %r", entry)
            continue
        resolved.add(format_iso_date(day))
    return frozenset(resolved)

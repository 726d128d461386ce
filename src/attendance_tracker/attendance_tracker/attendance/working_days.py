from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import DateLike, format_iso_date, iter_days, to_calendar_date
from .model import WorkingDayTally

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6


def count_working_days(
    start_date: Optional[DateLike],
    end_date: Optional[DateLike] = None,
    holidays: Iterable[str] = (),
    *,
    today: date,
) -> WorkingDayTally:
    """Count weekdays in [start_date, min(end_date or today, today)] that are not holidays.

    `holidays` is the set produced by `resolve_holiday_set`. A holiday that falls
    on a weekend is counted only as the weekend day. Bad or missing dates and
    periods that have not started yet give an all-zero tally; this function does
    not raise for bad input.
    """
    start = to_calendar_date(start_date)
    if start is None:
        if start_date is not None:
            logger.warning("Unparsable attendance start date: %r", start_date)
        return WorkingDayTally()

    end = today
    if end_date is not None:
        parsed_end = to_calendar_date(end_date)
        if parsed_end is None:
            logger.warning("Unparsable attendance end date: %r", end_date)
            return WorkingDayTally()
        end = min(parsed_end, today)

    if start > end:
        return WorkingDayTally()

    holiday_set = holidays if isinstance(holidays, (set, frozenset)) else frozenset(holidays or ())

    working = saturdays = sundays = skipped_holidays = 0
    for day in iter_days(start, end):
        weekday = day.weekday()
        if weekday == SUNDAY:
            sundays += 1
        elif weekday == SATURDAY:
            saturdays += 1
        elif format_iso_date(day) in holiday_set:
            skipped_holidays += 1
        else:
            working += 1

    return WorkingDayTally(
        working_days=working,
        skipped_saturdays=saturdays,
        skipped_sundays=sundays,
        skipped_holidays=skipped_holidays,
    )

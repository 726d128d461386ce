from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from src.attendance_tracker.attendance_tracker.common.datetime_utils import (
    get_timezone,
    iter_days,
    to_calendar_date,
    today_in,
)

IST = ZoneInfo("Asia/Kolkata")


def test_today_in_uses_institution_timezone():
    # 20:00 UTC on Jan 5 is already Jan 6 in IST.
    now = datetime(2024, 1, 5, 20, 0, tzinfo=timezone.utc)

    assert today_in(IST, now=now) == date(2024, 1, 6)


def test_to_calendar_date_variants():
    assert to_calendar_date("2024-01-06") == date(2024, 1, 6)
    assert to_calendar_date(" 2024-01-06 ") == date(2024, 1, 6)
    assert to_calendar_date(date(2024, 1, 6)) == date(2024, 1, 6)
    assert to_calendar_date("2024-01-06T10:15:00") == date(2024, 1, 6)
    assert to_calendar_date("06/01/2024") is None
    assert to_calendar_date(20240106) is None
    assert to_calendar_date(None) is None


def test_unknown_timezone_falls_back_to_default():
    assert get_timezone("Mars/Olympus") == ZoneInfo("Asia/Kolkata")


def test_iter_days_is_inclusive():
    days = list(iter_days(date(2024, 1, 30), date(2024, 2, 2)))

    assert days == [date(2024, 1, 30), date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2)]


def test_only_dashed_iso_dates_are_accepted():
    assert to_calendar_date("20240126") is None
    assert to_calendar_date("2024-W04-5") is None
    assert to_calendar_date("2024-01-26x10:00") is None
    assert to_calendar_date("2024-01-26 10:00") == date(2024, 1, 26)
    assert to_calendar_date("2024-01-25T18:30:00.000Z", IST) == date(2024, 1, 26)

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Union

from ..common.datetime_utils import format_iso_date, to_calendar_date
from ..core.enums import AttendanceStatus

logger = logging.getLogger(__name__)

StatusValue = Union[AttendanceStatus, str]


def _status_label(status: StatusValue) -> str:
    return status.value if isinstance(status, AttendanceStatus) else str(status)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance for one calendar day.

    `date` is a YYYY-MM-DD string in the institution's calendar. `status` is an
    AttendanceStatus when recognised, otherwise the raw value from the store.
    """

    date: str
    status: StatusValue
    reason: Optional[str] = None
    marked_by: Optional[str] = None

    def with_status(self, status: StatusValue) -> "AttendanceRecord":
        return replace(self, status=status)

    def as_dict(self) -> dict:
        return {
            "date": self.date,
            "status": _status_label(self.status),
            "reason": self.reason,
            "markedBy": self.marked_by,
        }


@dataclass(frozen=True)
class AttendanceUpdate:
    """A single `{date, status}` change pushed after a faculty mark or edit."""

    date: str
    status: StatusValue

    @classmethod
    def from_payload(cls, payload) -> Optional["AttendanceUpdate"]:
        if not isinstance(payload, dict):
            return None
        day = to_calendar_date(payload.get("date"))
        raw_status = payload.get("status")
        if day is None or not raw_status:
            logger.debug("Ignoring malformed attendance update payload: %r", payload)
            return None
        status = AttendanceStatus.parse(raw_status) or str(raw_status)
        return cls(date=format_iso_date(day), status=status)

    def as_record(self) -> AttendanceRecord:
        return AttendanceRecord(date=self.date, status=self.status)

    def as_dict(self) -> dict:
        return {"date": self.date, "status": _status_label(self.status)}


@dataclass(frozen=True)
class AttendancePeriod:
    """Date range over which working days are counted for a class."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class WorkingDayTally:
    """Breakdown of a date range into counted and excluded days."""

    working_days: int = 0
    skipped_saturdays: int = 0
    skipped_sundays: int = 0
    skipped_holidays: int = 0

    @property
    def total_days(self) -> int:
        return self.working_days + self.skipped_saturdays + self.skipped_sundays + self.skipped_holidays

    def as_dict(self) -> dict:
        return {
            "workingDays": self.working_days,
            "skippedSaturdays": self.skipped_saturdays,
            "skippedSundays": self.skipped_sundays,
            "skippedHolidays": self.skipped_holidays,
        }


@dataclass(frozen=True)
class AttendanceSummary:
    present_days: int
    od_days: int
    absent_days: int
    total_working_days: int
    attendance_percentage: Optional[int]

    @property
    def has_data(self) -> bool:
        return self.attendance_percentage is not None

    @property
    def display_percentage(self) -> str:
        if self.attendance_percentage is None:
            return "-"
        return f"{self.attendance_percentage}%"

    def as_dict(self) -> dict:
        return {
            "presentDays": self.present_days,
            "odDays": self.od_days,
            "absentDays": self.absent_days,
            "totalWorkingDays": self.total_working_days,
            "attendancePercentage": self.attendance_percentage,
        }


def record_from_row(row: dict) -> AttendanceRecord:
    """Map a data-layer row to a record, keeping the date a calendar string."""
    day = to_calendar_date(row.get("date"))
    raw_status = row.get("status")
    return AttendanceRecord(
        date=format_iso_date(day) if day else str(row.get("date")),
        status=AttendanceStatus.parse(raw_status) or str(raw_status),
        reason=row.get("reason") or None,
        marked_by=row.get("marked_by"),
    )


@dataclass(frozen=True)
class StudentMark:
    """Status to write for one student when a class is marked or edited."""

    student_id: int
    status: AttendanceStatus

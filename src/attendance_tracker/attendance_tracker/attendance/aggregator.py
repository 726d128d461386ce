from __future__ import annotations

from typing import Iterable, Optional

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceSummary, WorkingDayTally


def round_percentage(numerator: int, denominator: int) -> int:
    """Integer percentage rounded half-up (12.5 -> 13), without float error."""
    return (200 * numerator + denominator) // (2 * denominator)


def summarize(history: Iterable[AttendanceRecord], tally: Optional[WorkingDayTally]) -> AttendanceSummary:
    """Count statuses and compute the attendance percentage.

    OD counts as present in the numerator and stays in the denominator.
    NotMarked and unrecognised statuses are ignored. Without a usable tally the
    denominator falls back to the number of marked days. A zero denominator
    gives percentage None ("no data"), which is different from 0%.
    """
    present = od = absent = 0
    for record in history:
        status = AttendanceStatus.parse(record.status)
        if status is AttendanceStatus.PRESENT:
            present += 1
        elif status is AttendanceStatus.OD:
            od += 1
        elif status is AttendanceStatus.ABSENT:
            absent += 1

    if tally is not None and tally.working_days > 0:
        total = tally.working_days
    else:
        total = present + absent + od

    percentage = None
    if total > 0:
        percentage = max(0, min(100, round_percentage(present + od, total)))

    return AttendanceSummary(
        present_days=present,
        od_days=od,
        absent_days=absent,
        total_working_days=total,
        attendance_percentage=percentage,
    )

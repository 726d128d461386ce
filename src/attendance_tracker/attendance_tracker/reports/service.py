from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.aggregator import summarize
from ..attendance.model import WorkingDayTally
from ..attendance.repository import AttendanceRepository
from ..attendance.service import AttendanceService
from ..classes.repository import ClassAssignmentRepository, StudentRepository
from ..common.validators import require_iso_date
from ..core.constants import DEFAULT_LOW_ATTENDANCE_THRESHOLD, WARNING_ATTENDANCE_THRESHOLD
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError


def percentage_band(percentage: Optional[int], *, threshold: int = DEFAULT_LOW_ATTENDANCE_THRESHOLD) -> str:
    """Dashboard colour band for a percentage."""
    if percentage is None:
        return "no-data"
    if percentage >= threshold:
        return "good"
    if percentage >= WARNING_ATTENDANCE_THRESHOLD:
        return "warning"
    return "poor"


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


class ReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        classes: ClassAssignmentRepository,
        attendance_service: AttendanceService,
        *,
        threshold: int = DEFAULT_LOW_ATTENDANCE_THRESHOLD,
    ):
        self._attendance = attendance
        self._students = students
        self._classes = classes
        self._attendance_service = attendance_service
        self._threshold = int(threshold)

    def build_class_report(self, class_id: str, *, threshold: Optional[int] = None) -> ReportData:
        threshold = self._threshold if threshold is None else int(threshold)

        assignment = self._classes.get_active(class_id)
        if not assignment:
            raise NotFoundError("Class not found")

        ctx = self._attendance_service.period_context(assignment)
        students = sorted(self._students.list_for_class(class_id), key=lambda s: s.roll_number)
        by_student = self._attendance.list_for_class(class_id, start=ctx.start, end=ctx.end)

        rows: list[dict] = []
        for s in students:
            summary = summarize(by_student.get(s.student_id, ()), ctx.tally)
            pct = summary.attendance_percentage
            rows.append(
                {
                    "student_id": s.student_id,
                    "roll_number": s.roll_number,
                    "name": s.name,
                    "present_days": summary.present_days,
                    "od_days": summary.od_days,
                    "absent_days": summary.absent_days,
                    "total_working_days": summary.total_working_days,
                    "attendance_percentage": pct,
                    "band": percentage_band(pct, threshold=threshold),
                    "below_threshold": pct is not None and pct < threshold,
                }
            )

        defined = [r["attendance_percentage"] for r in rows if r["attendance_percentage"] is not None]
        tally = ctx.tally or WorkingDayTally()
        summary = {
            "class_id": class_id,
            "department": assignment.department,
            "total_students": len(rows),
            "average_percentage": round(sum(defined) / len(defined), 1) if defined else None,
            "below_threshold": sum(1 for r in rows if r["below_threshold"]),
            "threshold": threshold,
            "tally": tally.as_dict(),
        }
        return ReportData(rows=rows, summary=summary)

    def build_absentee_report(self, class_id: str, *, start, end) -> ReportData:
        """Students with at least one absence in [start, end], most absences first."""
        start_d: date = require_iso_date(start, "Start date")
        end_d: date = require_iso_date(end, "End date")
        if start_d > end_d:
            raise ValidationError("Start date must not be after end date")

        if not self._classes.get_active(class_id):
            raise NotFoundError("Class not found")

        students = {s.student_id: s for s in self._students.list_for_class(class_id)}
        by_student = self._attendance.list_for_class(class_id, start=start_d, end=end_d)

        rows: list[dict] = []
        for student_id, records in by_student.items():
            s = students.get(student_id)
            if not s:
                continue
            absences = [r for r in records if AttendanceStatus.parse(r.status) == AttendanceStatus.ABSENT]
            if not absences:
                continue
            absences.sort(key=lambda r: r.date, reverse=True)
            rows.append(
                {
                    "student_id": s.student_id,
                    "roll_number": s.roll_number,
                    "name": s.name,
                    "total_absent_days": len(absences),
                    "absent_dates": [r.date for r in absences],
                    "reason": absences[0].reason or "",
                }
            )

        rows.sort(key=lambda r: (-r["total_absent_days"], r["roll_number"]))
        summary = {
            "class_id": class_id,
            "start": start_d.strftime("%Y-%m-%d"),
            "end": end_d.strftime("%Y-%m-%d"),
            "students_with_absences": len(rows),
        }
        return ReportData(rows=rows, summary=summary)

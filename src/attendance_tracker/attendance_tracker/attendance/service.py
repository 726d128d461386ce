from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Callable, Iterable, Optional, Sequence

from ..classes.model import ClassAssignment, Student
from ..classes.repository import ClassAssignmentRepository, StudentRepository
from ..common.datetime_utils import format_iso_date, get_timezone, today_in
from ..common.validators import require_iso_date, require_max_length, require_non_empty
from ..core.constants import ABSENCE_REASON_MAX_LENGTH
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..holidays.model import Holiday
from ..holidays.resolver import resolve_holiday_set
from ..holidays.service import HolidayService
from .aggregator import summarize
from .incremental import AttendanceSession
from .model import (
    AttendancePeriod,
    AttendanceRecord,
    AttendanceSummary,
    AttendanceUpdate,
    StudentMark,
    WorkingDayTally,
)
from .notifier import AttendanceNotifier
from .repository import AttendanceRepository
from .working_days import SATURDAY, count_working_days

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodContext:
    """Window over which records are read and working days are counted.

    `end` is min(period end, today); records after it are never counted.
    """

    period: AttendancePeriod
    end: Optional[date]
    holidays: tuple[Holiday, ...]
    tally: Optional[WorkingDayTally]

    @property
    def start(self) -> Optional[date]:
        return self.period.start_date


@dataclass(frozen=True)
class StudentAttendanceView:
    """Read-model for the student dashboard and profile screens."""

    student: Student
    period: AttendancePeriod
    records: tuple[AttendanceRecord, ...]
    holidays: tuple[Holiday, ...]
    tally: Optional[WorkingDayTally]
    summary: AttendanceSummary

    def as_dict(self, *, limit: Optional[int] = None) -> dict:
        records = self.records[:limit] if limit else self.records
        return {
            "student": {
                "id": self.student.student_id,
                "rollNumber": self.student.roll_number,
                "name": self.student.name,
                "department": self.student.department,
                "classAssigned": self.student.class_id,
            },
            "attendance": {
                "records": [r.as_dict() for r in records],
                "holidays": [h.as_dict() for h in self.holidays],
                "summary": self.summary.as_dict(),
                "tally": self.tally.as_dict() if self.tally else None,
            },
        }


@dataclass(frozen=True)
class MarkResult:
    class_id: str
    date: str
    total_students: int
    absent_students: int
    od_students: int
    records_written: int

    def as_dict(self) -> dict:
        return {
            "class": self.class_id,
            "date": self.date,
            "totalStudents": self.total_students,
            "absentStudents": self.absent_students,
            "odStudents": self.od_students,
            "recordsWritten": self.records_written,
        }


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        classes: ClassAssignmentRepository,
        holidays: HolidayService,
        *,
        notifier: Optional[AttendanceNotifier] = None,
        tz: Optional[tzinfo] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._classes = classes
        self._holidays = holidays
        self._notifier = notifier or AttendanceNotifier()
        self._tz = tz or get_timezone()
        self._clock = clock or (lambda: today_in(self._tz))

    def today(self) -> date:
        return self._clock()

    def period_context(self, assignment: Optional[ClassAssignment]) -> PeriodContext:
        """Holidays and working-day tally for a class period up to today.

        Without an attendance start date the tally is None and the aggregator
        falls back to the number of marked days.
        """
        if not assignment:
            return PeriodContext(period=AttendancePeriod(), end=None, holidays=(), tally=None)

        period = assignment.period
        today = self.today()
        end = min(period.end_date or today, today)
        if not period.start_date:
            return PeriodContext(period=period, end=end, holidays=(), tally=None)

        holidays: tuple[Holiday, ...] = ()
        if period.start_date <= end:
            holidays = tuple(
                self._holidays.list_for_department(assignment.department, start=period.start_date, end=end)
            )
        tally = count_working_days(
            period.start_date,
            period.end_date,
            resolve_holiday_set(holidays, tz=self._tz),
            today=today,
        )
        return PeriodContext(period=period, end=end, holidays=holidays, tally=tally)

    def _get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    @staticmethod
    def _require_can_view(current_role: Role, current_student_id: Optional[int], student_id: int) -> None:
        if current_role == Role.STUDENT and current_student_id != int(student_id):
            raise AuthorizationError("You can only view your own attendance")

    def student_summary(
        self,
        student_id: int,
        *,
        current_role: Role,
        current_student_id: Optional[int] = None,
    ) -> StudentAttendanceView:
        self._require_can_view(current_role, current_student_id, student_id)
        student = self._get_student(student_id)
        ctx = self.period_context(self._classes.get_active(student.class_id))

        records = tuple(self._attendance.list_for_student(student.student_id, start=ctx.start, end=ctx.end))
        summary = summarize(records, ctx.tally)
        return StudentAttendanceView(
            student=student,
            period=ctx.period,
            records=records,
            holidays=ctx.holidays,
            tally=ctx.tally,
            summary=summary,
        )

    def start_session(
        self,
        student_id: int,
        *,
        current_role: Role,
        current_student_id: Optional[int] = None,
        session: Optional[AttendanceSession] = None,
    ) -> AttendanceSession:
        """Load history into a session; updates buffered in `session` are replayed."""
        view = self.student_summary(student_id, current_role=current_role, current_student_id=current_student_id)
        return (session or AttendanceSession.empty()).loaded(view.records, view.tally)

    def _require_class_access(self, *, current_role: Role, faculty_id: Optional[int], class_id: str) -> ClassAssignment:
        if not Role(current_role).is_faculty_or_above:
            raise AuthorizationError("Only faculty and above can mark attendance")

        assignment = self._classes.get_active(class_id)
        if not assignment:
            raise NotFoundError("Class not found")

        if current_role == Role.FACULTY and assignment.faculty_id != faculty_id:
            raise AuthorizationError("You are not assigned to this class")
        return assignment

    def _resolve_day(self, value) -> date:
        day = require_iso_date(value, "Date") if value else self.today()
        if day > self.today():
            raise ValidationError("Cannot mark attendance for a future date")
        return day

    @staticmethod
    def _build_marks(
        students: Sequence[Student],
        absent_roll_numbers: Iterable,
        od_roll_numbers: Iterable,
    ) -> list[StudentMark]:
        absent = {str(r).strip() for r in absent_roll_numbers or () if str(r).strip()}
        od = {str(r).strip() for r in od_roll_numbers or () if str(r).strip()}

        both = absent & od
        if both:
            raise ValidationError(f"Roll number marked both absent and OD: {sorted(both)[0]}")

        known = {s.roll_number for s in students}
        for roll in sorted(absent | od):
            if roll not in known:
                raise ValidationError(f"Invalid roll number for this class: {roll}")

        marks = []
        for s in students:
            if s.roll_number in absent:
                status = AttendanceStatus.ABSENT
            elif s.roll_number in od:
                status = AttendanceStatus.OD
            else:
                status = AttendanceStatus.PRESENT
            marks.append(StudentMark(student_id=s.student_id, status=status))
        return marks

    def _load_class(self, class_id: str) -> Sequence[Student]:
        students = self._students.list_for_class(class_id)
        if not students:
            raise NotFoundError("No students found for this class")
        return students

    def _publish(self, day: date, marks: Sequence[StudentMark]) -> None:
        day_s = format_iso_date(day)
        for m in marks:
            self._notifier.publish(m.student_id, AttendanceUpdate(date=day_s, status=m.status))

    def _result(self, class_id: str, day: date, marks: Sequence[StudentMark], written: int) -> MarkResult:
        return MarkResult(
            class_id=class_id,
            date=format_iso_date(day),
            total_students=len(marks),
            absent_students=sum(1 for m in marks if m.status == AttendanceStatus.ABSENT),
            od_students=sum(1 for m in marks if m.status == AttendanceStatus.OD),
            records_written=written,
        )

    def mark_class(
        self,
        *,
        current_role: Role,
        faculty_id: Optional[int],
        class_id: str,
        day=None,
        absent_roll_numbers: Iterable = (),
        od_roll_numbers: Iterable = (),
    ) -> MarkResult:
        """Mark a class for one day: listed rolls Absent/OD, everyone else Present."""
        assignment = self._require_class_access(current_role=current_role, faculty_id=faculty_id, class_id=class_id)
        day = self._resolve_day(day)

        period = assignment.period
        if (period.start_date and day < period.start_date) or (period.end_date and day > period.end_date):
            raise ValidationError("Date is outside the class attendance period")
        if day.weekday() >= SATURDAY:
            raise ValidationError("Cannot mark attendance on a weekend")
        if format_iso_date(day) in self._holidays.active_holiday_set(assignment.department, start=day, end=day):
            raise ValidationError("Cannot mark attendance on a declared holiday")

        students = self._load_class(class_id)
        marks = self._build_marks(students, absent_roll_numbers, od_roll_numbers)

        if self._attendance.count_marked_for_class(class_id, day) > 0:
            raise ValidationError("Attendance already marked. Use edit attendance.")

        written = self._attendance.bulk_create(day=day, faculty_id=faculty_id, marks=marks)
        logger.info("Attendance marked: class=%s date=%s records=%s by=%s", class_id, day, written, faculty_id)
        self._publish(day, marks)
        return self._result(class_id, day, marks, written)

    def edit_class(
        self,
        *,
        current_role: Role,
        faculty_id: Optional[int],
        class_id: str,
        day,
        absent_roll_numbers: Iterable = (),
        od_roll_numbers: Iterable = (),
    ) -> MarkResult:
        self._require_class_access(current_role=current_role, faculty_id=faculty_id, class_id=class_id)
        if not day:
            raise ValidationError("Date is required")
        day = self._resolve_day(day)

        students = self._load_class(class_id)
        marks = self._build_marks(students, absent_roll_numbers, od_roll_numbers)

        if self._attendance.count_marked_for_class(class_id, day) == 0:
            raise ValidationError("No attendance marked for this date")

        written = self._attendance.bulk_update(day=day, faculty_id=faculty_id, marks=marks)
        logger.info("Attendance edited: class=%s date=%s records=%s by=%s", class_id, day, written, faculty_id)
        self._publish(day, marks)
        return self._result(class_id, day, marks, written)

    def submit_reason(
        self,
        *,
        current_role: Role,
        current_student_id: Optional[int],
        student_id: int,
        day,
        reason: str,
    ) -> AttendanceRecord:
        if current_role == Role.STUDENT and current_student_id != int(student_id):
            raise AuthorizationError("You can only submit reasons for your own attendance")

        day = require_iso_date(day, "Date")
        reason = require_non_empty(reason, "Reason")
        reason = require_max_length(reason, "Reason", ABSENCE_REASON_MAX_LENGTH)

        record = self._attendance.get_for_student_and_date(int(student_id), day)
        if not record:
            raise NotFoundError("Attendance record not found")

        if AttendanceStatus.parse(record.status) not in (AttendanceStatus.ABSENT, AttendanceStatus.OD):
            raise ValidationError("Can only submit reasons for absent or OD attendance")

        # The record was just read; an unchanged reason is still a success.
        self._attendance.set_reason(student_id=int(student_id), day=day, reason=reason)
        return AttendanceRecord(date=record.date, status=record.status, reason=reason, marked_by=record.marked_by)

from __future__ import annotations

from datetime import date
from zoneinfo import ZoneInfo

import pytest

from src.attendance_tracker.attendance_tracker.attendance.incremental import AttendanceSession
from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceUpdate
from src.attendance_tracker.attendance_tracker.attendance.notifier import AttendanceNotifier
from src.attendance_tracker.attendance_tracker.attendance.service import AttendanceService
from src.attendance_tracker.attendance_tracker.classes.model import ClassAssignment
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus, Role
from src.attendance_tracker.attendance_tracker.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.attendance_tracker.attendance_tracker.holidays.model import Holiday
from src.attendance_tracker.attendance_tracker.holidays.service import HolidayService
from tests.fakes import (
    ChangedRowsAttendance,
    InMemoryAttendance,
    InMemoryClasses,
    InMemoryHolidays,
    InMemoryStudents,
    make_student,
)

TODAY = date(2024, 1, 12)  # Friday
FACULTY_ID = 7


def build(*, start_date=date(2024, 1, 1), end_date=None, faculty_id=FACULTY_ID, attendance_cls=InMemoryAttendance):
    students = InMemoryStudents({1: make_student(1, "01"), 2: make_student(2, "02"), 3: make_student(3, "03")})
    classes = InMemoryClasses(
        {
            "2A": ClassAssignment(
                class_id="2A",
                department="CSE",
                faculty_id=faculty_id,
                attendance_start_date=start_date,
                attendance_end_date=end_date,
            )
        }
    )
    holidays = InMemoryHolidays(
        [
            Holiday(holiday_id=1, department="CSE", holiday_date=date(2024, 1, 10), reason="Pongal"),
            Holiday(holiday_id=2, department="ECE", holiday_date=date(2024, 1, 11), reason="Other dept"),
            Holiday(holiday_id=3, department="CSE", holiday_date=date(2024, 1, 9), reason="Cancelled", is_deleted=True),
        ]
    )
    attendance = attendance_cls(students)
    notifier = AttendanceNotifier()
    tz = ZoneInfo("Asia/Kolkata")
    svc = AttendanceService(
        attendance,
        students,
        classes,
        HolidayService(holidays, tz=tz),
        notifier=notifier,
        tz=tz,
        clock=lambda: TODAY,
    )
    return svc, attendance, notifier


def seed_student_one(attendance: InMemoryAttendance):
    attendance.put(1, date(2024, 1, 1), AttendanceStatus.PRESENT)
    attendance.put(1, date(2024, 1, 2), AttendanceStatus.PRESENT)
    attendance.put(1, date(2024, 1, 3), AttendanceStatus.ABSENT, reason="Fever")
    attendance.put(1, date(2024, 1, 4), AttendanceStatus.OD)


def test_student_summary_uses_working_days_since_period_start():
    svc, attendance, _ = build()
    seed_student_one(attendance)

    view = svc.student_summary(1, current_role=Role.STUDENT, current_student_id=1)

    assert view.tally.working_days == 9
    assert view.tally.skipped_holidays == 1
    assert view.tally.total_days == 12
    assert view.summary.present_days == 2
    assert view.summary.od_days == 1
    assert view.summary.absent_days == 1
    assert view.summary.attendance_percentage == 33
    assert [h.reason for h in view.holidays] == ["Pongal"]
    assert view.records[0].date == "2024-01-04"


def test_student_summary_without_start_date_falls_back_to_marked_days():
    svc, attendance, _ = build(start_date=None)
    seed_student_one(attendance)

    view = svc.student_summary(1, current_role=Role.FACULTY)

    assert view.tally is None
    assert view.summary.total_working_days == 4
    assert view.summary.attendance_percentage == 75


def test_student_summary_before_period_starts_has_no_data():
    svc, _, _ = build(start_date=date(2024, 2, 1))

    view = svc.student_summary(2, current_role=Role.HOD)

    assert view.tally.working_days == 0
    assert view.summary.attendance_percentage is None


def test_student_cannot_view_other_students():
    svc, _, _ = build()

    with pytest.raises(AuthorizationError):
        svc.student_summary(2, current_role=Role.STUDENT, current_student_id=1)


def test_unknown_student_raises_not_found():
    svc, _, _ = build()

    with pytest.raises(NotFoundError):
        svc.student_summary(99, current_role=Role.ADMIN)


def test_view_as_dict_applies_limit_to_records_only():
    svc, attendance, _ = build()
    seed_student_one(attendance)

    data = svc.student_summary(1, current_role=Role.ADMIN).as_dict(limit=2)

    assert len(data["attendance"]["records"]) == 2
    assert data["attendance"]["summary"]["presentDays"] == 2
    assert data["attendance"]["tally"]["workingDays"] == 9


def test_mark_class_defaults_to_present_and_publishes_updates():
    svc, attendance, notifier = build()
    received = []
    notifier.subscribe(2, received.append)

    result = svc.mark_class(
        current_role=Role.FACULTY,
        faculty_id=FACULTY_ID,
        class_id="2A",
        day="2024-01-11",
        absent_roll_numbers=["02"],
        od_roll_numbers=["03"],
    )

    assert result.total_students == 3
    assert result.absent_students == 1
    assert result.od_students == 1
    assert attendance.get_for_student_and_date(1, date(2024, 1, 11)).status == AttendanceStatus.PRESENT
    assert attendance.get_for_student_and_date(3, date(2024, 1, 11)).status == AttendanceStatus.OD
    assert received == [AttendanceUpdate(date="2024-01-11", status=AttendanceStatus.ABSENT)]


def test_mark_class_defaults_to_today():
    svc, attendance, _ = build()

    result = svc.mark_class(current_role=Role.ADMIN, faculty_id=1, class_id="2A")

    assert result.date == "2024-01-12"
    assert attendance.count_marked_for_class("2A", TODAY) == 3


def test_mark_class_twice_is_rejected():
    svc, _, _ = build()
    svc.mark_class(current_role=Role.FACULTY, faculty_id=FACULTY_ID, class_id="2A", day="2024-01-11")

    with pytest.raises(ValidationError, match="already marked"):
        svc.mark_class(current_role=Role.FACULTY, faculty_id=FACULTY_ID, class_id="2A", day="2024-01-11")


@pytest.mark.parametrize(
    "day, message",
    [
        ("2024-01-06", "weekend"),
        ("2024-01-10", "holiday"),
        ("2024-01-15", "future"),
        ("11-01-2024", "valid date"),
    ],
)
def test_mark_class_rejects_non_markable_days(day, message):
    svc, _, _ = build()

    with pytest.raises(ValidationError, match=message):
        svc.mark_class(current_role=Role.FACULTY, faculty_id=FACULTY_ID, class_id="2A", day=day)


def test_soft_deleted_and_other_department_holidays_do_not_block_marking():
    svc, _, _ = build()

    svc.mark_class(current_role=Role.FACULTY, faculty_id=FACULTY_ID, class_id="2A", day="2024-01-09")
    svc.mark_class(current_role=Role.FACULTY, faculty_id=FACULTY_ID, class_id="2A", day="2024-01-11")


def test_faculty_can_only_mark_assigned_class():
    svc, _, _ = build()

    with pytest.raises(AuthorizationError):
        svc.mark_class(current_role=Role.FACULTY, faculty_id=99, class_id="2A", day="2024-01-11")

    with pytest.raises(AuthorizationError):
        svc.mark_class(current_role=Role.STUDENT, faculty_id=None, class_id="2A", day="2024-01-11")

    # HOD may mark any class of the department.
    svc.mark_class(current_role=Role.HOD, faculty_id=99, class_id="2A", day="2024-01-11")


def test_mark_unknown_class_raises_not_found():
    svc, _, _ = build()

    with pytest.raises(NotFoundError):
        svc.mark_class(current_role=Role.ADMIN, faculty_id=1, class_id="9Z", day="2024-01-11")


def test_mark_rejects_unknown_and_conflicting_roll_numbers():
    svc, _, _ = build()

    with pytest.raises(ValidationError, match="Invalid roll number"):
        svc.mark_class(current_role=Role.ADMIN, faculty_id=1, class_id="2A", day="2024-01-11", absent_roll_numbers=["42"])

    with pytest.raises(ValidationError, match="both absent and OD"):
        svc.mark_class(
            current_role=Role.ADMIN,
            faculty_id=1,
            class_id="2A",
            day="2024-01-11",
            absent_roll_numbers=["01"],
            od_roll_numbers=["01"],
        )


def test_edit_class_updates_marks_and_clears_reason_on_present():
    svc, attendance, notifier = build()
    svc.mark_class(current_role=Role.FACULTY, faculty_id=FACULTY_ID, class_id="2A", day="2024-01-11", absent_roll_numbers=["02"])
    attendance.set_reason(student_id=2, day=date(2024, 1, 11), reason="Bus strike")
    received = []
    notifier.subscribe(2, received.append)

    result = svc.edit_class(current_role=Role.FACULTY, faculty_id=FACULTY_ID, class_id="2A", day="2024-01-11")

    record = attendance.get_for_student_and_date(2, date(2024, 1, 11))
    assert result.records_written == 3
    assert record.status == AttendanceStatus.PRESENT
    assert record.reason is None
    assert received == [AttendanceUpdate(date="2024-01-11", status=AttendanceStatus.PRESENT)]


def test_edit_class_requires_existing_marks():
    svc, _, _ = build()

    with pytest.raises(ValidationError, match="No attendance marked"):
        svc.edit_class(current_role=Role.FACULTY, faculty_id=FACULTY_ID, class_id="2A", day="2024-01-11")


def test_student_submits_reason_for_own_absence():
    svc, attendance, _ = build()
    seed_student_one(attendance)

    record = svc.submit_reason(
        current_role=Role.STUDENT, current_student_id=1, student_id=1, day="2024-01-03", reason="  Medical leave "
    )

    assert record.reason == "Medical leave"
    assert attendance.get_for_student_and_date(1, date(2024, 1, 3)).reason == "Medical leave"


def test_reason_rules():
    svc, attendance, _ = build()
    seed_student_one(attendance)

    with pytest.raises(ValidationError, match="absent or OD"):
        svc.submit_reason(current_role=Role.STUDENT, current_student_id=1, student_id=1, day="2024-01-01", reason="x")

    with pytest.raises(AuthorizationError):
        svc.submit_reason(current_role=Role.STUDENT, current_student_id=2, student_id=1, day="2024-01-03", reason="x")

    with pytest.raises(ValidationError, match="500"):
        svc.submit_reason(current_role=Role.STUDENT, current_student_id=1, student_id=1, day="2024-01-03", reason="x" * 501)

    with pytest.raises(ValidationError, match="required"):
        svc.submit_reason(current_role=Role.STUDENT, current_student_id=1, student_id=1, day="2024-01-03", reason="   ")

    with pytest.raises(NotFoundError):
        svc.submit_reason(current_role=Role.STUDENT, current_student_id=1, student_id=1, day="2024-01-05", reason="x")


def test_start_session_replays_updates_received_before_load():
    svc, attendance, _ = build()
    seed_student_one(attendance)
    early = AttendanceSession.empty().apply(AttendanceUpdate(date="2024-01-04", status=AttendanceStatus.ABSENT))

    session = svc.start_session(1, current_role=Role.STUDENT, current_student_id=1, session=early)

    assert session.is_loaded
    assert session.summary.od_days == 0
    assert session.summary.absent_days == 2
    assert session.summary.attendance_percentage == 22


def test_notifier_survives_failing_subscriber():
    notifier = AttendanceNotifier()
    received = []

    def broken(update):
        raise RuntimeError("socket closed")

    notifier.subscribe(5, broken)
    unsubscribe = notifier.subscribe(5, received.append)

    update = AttendanceUpdate(date="2024-01-11", status=AttendanceStatus.PRESENT)
    assert notifier.publish(5, update) == 1
    assert received == [update]

    unsubscribe()
    assert notifier.publish(5, update) == 0


def test_records_after_period_end_are_not_counted():
    svc, attendance, _ = build(end_date=date(2024, 1, 5))
    for day in range(1, 6):
        attendance.put(2, date(2024, 1, day), AttendanceStatus.ABSENT)
    for day in range(8, 13):
        attendance.put(2, date(2024, 1, day), AttendanceStatus.PRESENT)

    view = svc.student_summary(2, current_role=Role.ADMIN)

    assert view.tally.working_days == 5
    assert view.summary.present_days == 0
    assert view.summary.absent_days == 5
    assert view.summary.attendance_percentage == 0
    assert [r.date for r in view.records] == ["2024-01-05", "2024-01-04", "2024-01-03", "2024-01-02", "2024-01-01"]


def test_marking_outside_the_period_is_rejected():
    svc, _, _ = build(start_date=date(2024, 1, 3), end_date=date(2024, 1, 5))

    with pytest.raises(ValidationError, match="outside the class attendance period"):
        svc.mark_class(current_role=Role.FACULTY, faculty_id=FACULTY_ID, class_id="2A", day="2024-01-08")

    with pytest.raises(ValidationError, match="outside the class attendance period"):
        svc.mark_class(current_role=Role.FACULTY, faculty_id=FACULTY_ID, class_id="2A", day="2024-01-02")

    svc.mark_class(current_role=Role.FACULTY, faculty_id=FACULTY_ID, class_id="2A", day="2024-01-05")


def test_resubmitting_the_same_reason_succeeds():
    svc, attendance, _ = build(attendance_cls=ChangedRowsAttendance)
    seed_student_one(attendance)

    record = svc.submit_reason(
        current_role=Role.STUDENT, current_student_id=1, student_id=1, day="2024-01-03", reason="Fever"
    )

    assert record.reason == "Fever"
    assert attendance.get_for_student_and_date(1, date(2024, 1, 3)).reason == "Fever"

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.notifier import AttendanceNotifier
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassAssignmentRepository, MySQLStudentRepository
from .common.datetime_utils import get_timezone
from .core.constants import DEFAULT_LOW_ATTENDANCE_THRESHOLD
from .database.connection import DBConfig, DatabaseConnection
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayService
from .reports.service import ReportService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendance_repo: MySQLAttendanceRepository
    students_repo: MySQLStudentRepository
    classes_repo: MySQLClassAssignmentRepository
    holidays_repo: MySQLHolidayRepository

    notifier: AttendanceNotifier
    holiday_service: HolidayService
    attendance_service: AttendanceService
    report_service: ReportService


def build_container(
    *,
    db_config: dict,
    timezone_name: Optional[str] = None,
    low_attendance_threshold: int = DEFAULT_LOW_ATTENDANCE_THRESHOLD,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))
    tz = get_timezone(timezone_name)

    attendance_repo = MySQLAttendanceRepository(conn)
    students_repo = MySQLStudentRepository(conn)
    classes_repo = MySQLClassAssignmentRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)

    notifier = AttendanceNotifier()
    holiday_service = HolidayService(holidays_repo, tz=tz)
    attendance_service = AttendanceService(
        attendance_repo,
        students_repo,
        classes_repo,
        holiday_service,
        notifier=notifier,
        tz=tz,
    )
    report_service = ReportService(
        attendance_repo,
        students_repo,
        classes_repo,
        attendance_service,
        threshold=low_attendance_threshold,
    )

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        students_repo=students_repo,
        classes_repo=classes_repo,
        holidays_repo=holidays_repo,
        notifier=notifier,
        holiday_service=holiday_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )

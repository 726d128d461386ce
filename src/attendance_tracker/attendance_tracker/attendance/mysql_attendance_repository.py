from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, StudentMark, record_from_row
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.student_id, a.attendance_date AS date, a.status, a.reason, u.name AS marked_by
    FROM attendance_records a
    LEFT JOIN faculty u ON u.faculty_id = a.faculty_id
"""


def _range_clause(start: Optional[date], end: Optional[date], params: list) -> str:
    clause = ""
    if start:
        clause += " AND a.attendance_date >= %s"
        params.append(start)
    if end:
        clause += " AND a.attendance_date <= %s"
        params.append(end)
    return clause


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_student(
        self,
        student_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        params: list = [int(student_id)]
        sql = _SELECT + " WHERE a.student_id=%s" + _range_clause(start, end, params)
        sql += " ORDER BY a.attendance_date DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [record_from_row(r) for r in fetchall(cur)]

    def get_for_student_and_date(self, student_id: int, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE a.student_id=%s AND a.attendance_date=%s",
                (int(student_id), day),
            )
            r = fetchone(cur)
            return record_from_row(r) if r else None

    def count_marked_for_class(self, class_id: str, day: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS cnt
                FROM attendance_records a
                JOIN students s ON s.student_id = a.student_id
                WHERE s.class_id=%s AND a.attendance_date=%s
                """,
                (class_id, day),
            )
            r = fetchone(cur)
            return int(r["cnt"]) if r else 0

    def list_for_class(
        self,
        class_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Mapping[int, Sequence[AttendanceRecord]]:
        params: list = [class_id]
        sql = (
            _SELECT
            + " JOIN students s ON s.student_id = a.student_id WHERE s.class_id=%s"
            + _range_clause(start, end, params)
            + " ORDER BY a.attendance_date DESC"
        )

        by_student: dict[int, list[AttendanceRecord]] = defaultdict(list)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            for r in fetchall(cur):
                by_student[int(r["student_id"])].append(record_from_row(r))
        return dict(by_student)

    def bulk_create(self, *, day: date, faculty_id: Optional[int], marks: Sequence[StudentMark]) -> int:
        if not marks:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance_records(student_id, faculty_id, attendance_date, status)
                VALUES(%s,%s,%s,%s)
                """,
                [(m.student_id, faculty_id, day, m.status.value) for m in marks],
            )
            return int(cur.rowcount)

    def bulk_update(self, *, day: date, faculty_id: Optional[int], marks: Sequence[StudentMark]) -> int:
        updated = 0
        with db_cursor(self._conn_factory) as (_, cur):
            for m in marks:
                if m.status == AttendanceStatus.PRESENT:
                    cur.execute(
                        """
                        UPDATE attendance_records
                        SET status=%s, faculty_id=%s, reason=NULL
                        WHERE student_id=%s AND attendance_date=%s
                        """,
                        (m.status.value, faculty_id, m.student_id, day),
                    )
                else:
                    cur.execute(
                        """
                        UPDATE attendance_records
                        SET status=%s, faculty_id=%s
                        WHERE student_id=%s AND attendance_date=%s
                        """,
                        (m.status.value, faculty_id, m.student_id, day),
                    )
                updated += int(cur.rowcount)
        return updated

    def set_reason(self, *, student_id: int, day: date, reason: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET reason=%s
                WHERE student_id=%s AND attendance_date=%s
                """,
                (reason, int(student_id), day),
            )
            return cur.rowcount > 0

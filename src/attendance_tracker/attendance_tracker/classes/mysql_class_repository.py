from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ClassAssignment, Student
from .repository import ClassAssignmentRepository, StudentRepository


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        roll_number=str(r["roll_number"]),
        name=r["name"],
        department=r["department"],
        class_id=r["class_id"],
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, roll_number, name, department, class_id, is_active
                FROM students
                WHERE student_id=%s
                """,
                (int(student_id),),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None

    def list_for_class(self, class_id: str) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, roll_number, name, department, class_id, is_active
                FROM students
                WHERE class_id=%s AND is_active=1
                ORDER BY roll_number
                """,
                (class_id,),
            )
            return [_to_student(r) for r in fetchall(cur)]


class MySQLClassAssignmentRepository(ClassAssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self, class_id: str) -> Optional[ClassAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT class_id, department, faculty_id, attendance_start_date, attendance_end_date, active
                FROM class_assignments
                WHERE class_id=%s AND active=1
                ORDER BY assignment_id DESC
                LIMIT 1
                """,
                (class_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return ClassAssignment(
                class_id=r["class_id"],
                department=r["department"],
                faculty_id=int(r["faculty_id"]) if r.get("faculty_id") is not None else None,
                attendance_start_date=r.get("attendance_start_date"),
                attendance_end_date=r.get("attendance_end_date"),
                active=bool(r["active"]),
            )

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.model import AttendancePeriod


@dataclass(frozen=True)
class Student:
    """Domain entity: a student enrolled in one class of a department."""

    student_id: int
    roll_number: str
    name: str
    department: str
    class_id: str
    is_active: bool = True


@dataclass(frozen=True)
class ClassAssignment:
    """A class handed to a faculty member, with its attendance date range."""

    class_id: str
    department: str
    faculty_id: Optional[int]
    attendance_start_date: Optional[date] = None
    attendance_end_date: Optional[date] = None
    active: bool = True

    @property
    def period(self) -> AttendancePeriod:
        return AttendancePeriod(start_date=self.attendance_start_date, end_date=self.attendance_end_date)

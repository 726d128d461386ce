from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    PRINCIPAL = "principal"
    HOD = "hod"
    FACULTY = "faculty"
    STUDENT = "student"

    @property
    def is_faculty_or_above(self) -> bool:
        return self is not Role.STUDENT

    @property
    def is_hod_or_above(self) -> bool:
        return self in (Role.ADMIN, Role.PRINCIPAL, Role.HOD)


class AttendanceStatus(str, Enum):
    """Daily attendance status as stored by the data layer."""

    PRESENT = "Present"
    ABSENT = "Absent"
    OD = "OD"
    NOT_MARKED = "NotMarked"

    @classmethod
    def parse(cls, value) -> Optional["AttendanceStatus"]:
        """Lenient lookup; unrecognised values give None instead of raising."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None

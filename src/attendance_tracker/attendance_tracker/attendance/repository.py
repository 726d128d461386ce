from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from .model import AttendanceRecord, StudentMark


class AttendanceRepository(Protocol):
    def list_for_student(
        self,
        student_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records of one student, newest first."""

        raise NotImplementedError

    def get_for_student_and_date(self, student_id: int, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def count_marked_for_class(self, class_id: str, day: date) -> int:
        raise NotImplementedError

    def list_for_class(
        self,
        class_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Mapping[int, Sequence[AttendanceRecord]]:
        """Records of every student in a class keyed by student id, newest first."""

        raise NotImplementedError

    def bulk_create(self, *, day: date, faculty_id: Optional[int], marks: Sequence[StudentMark]) -> int:
        raise NotImplementedError

    def bulk_update(self, *, day: date, faculty_id: Optional[int], marks: Sequence[StudentMark]) -> int:
        """Update existing marks only; Present clears the absence reason."""

        raise NotImplementedError

    def set_reason(self, *, student_id: int, day: date, reason: str) -> bool:
        raise NotImplementedError

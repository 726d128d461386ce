from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassAssignment, Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def list_for_class(self, class_id: str) -> Sequence[Student]:
        """Active students of a class ordered by roll number."""

        raise NotImplementedError


class ClassAssignmentRepository(Protocol):
    def get_active(self, class_id: str) -> Optional[ClassAssignment]:
        raise NotImplementedError

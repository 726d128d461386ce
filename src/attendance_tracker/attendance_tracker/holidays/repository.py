from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def list_active(self, *, department: str, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Holiday]:
        """Non-deleted holidays of a department ordered by date, optionally bounded."""

        raise NotImplementedError

    def get_active_by_id(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError

    def find_active_on(self, *, department: str, holiday_date: date) -> Optional[Holiday]:
        raise NotImplementedError

    def create(self, *, department: str, holiday_date: date, reason: str, created_by: Optional[int]) -> int:
        raise NotImplementedError

    def update(self, *, holiday_id: int, holiday_date: date, reason: str, updated_by: Optional[int]) -> bool:
        raise NotImplementedError

    def soft_delete(self, *, holiday_id: int, deleted_by: Optional[int]) -> bool:
        """Flag the holiday as deleted; the row is kept for audit."""

        raise NotImplementedError

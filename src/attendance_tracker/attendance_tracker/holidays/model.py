from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Holiday:
    """Domain entity: a department holiday declared by HOD/admin.

    Holidays are soft-deleted; only rows with `is_deleted=False` may reach the
    working-day calculator.
    """

    holiday_id: int
    department: str
    holiday_date: date
    reason: str
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    is_deleted: bool = False

    def as_dict(self) -> dict:
        return {
            "id": self.holiday_id,
            "date": self.holiday_date.strftime("%Y-%m-%d"),
            "reason": self.reason,
            "department": self.department,
            "createdBy": self.created_by,
            "updatedBy": self.updated_by,
        }

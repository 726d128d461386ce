from __future__ import annotations

import logging
from datetime import date, tzinfo
from typing import Optional, Sequence

from ..common.datetime_utils import get_timezone, today_in
from ..common.validators import require_iso_date, require_max_length, require_non_empty
from ..core.constants import HOLIDAY_REASON_MAX_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Holiday
from .repository import HolidayRepository
from .resolver import resolve_holiday_set

logger = logging.getLogger(__name__)


class HolidayService:
    """Use cases: declare, edit, soft-delete and list department holidays."""

    def __init__(self, holidays: HolidayRepository, *, tz: Optional[tzinfo] = None):
        self._holidays = holidays
        self._tz = tz or get_timezone()

    @staticmethod
    def _require_manager(current_role: Role) -> None:
        if not Role(current_role).is_hod_or_above:
            raise AuthorizationError("Only HOD, principal or admin can manage holidays")

    @staticmethod
    def _clean_reason(reason: str) -> str:
        reason = require_non_empty(reason, "Holiday reason")
        return require_max_length(reason, "Holiday reason", HOLIDAY_REASON_MAX_LENGTH)

    def _get_owned(self, *, department: str, holiday_id: int) -> Holiday:
        holiday = self._holidays.get_active_by_id(int(holiday_id))
        if not holiday or holiday.department != department:
            raise NotFoundError("Holiday not found")
        return holiday

    def declare(
        self,
        *,
        current_role: Role,
        user_id: Optional[int],
        department: str,
        holiday_date,
        reason: str,
    ) -> int:
        self._require_manager(current_role)
        department = require_non_empty(department, "Department")
        day = require_iso_date(holiday_date, "Holiday date")
        reason = self._clean_reason(reason)

        if self._holidays.find_active_on(department=department, holiday_date=day):
            raise ValidationError("Holiday already exists for this date in your department")

        holiday_id = self._holidays.create(department=department, holiday_date=day, reason=reason, created_by=user_id)
        logger.info("Holiday declared: department=%s date=%s by=%s", department, day, user_id)
        return holiday_id

    def update(
        self,
        *,
        current_role: Role,
        user_id: Optional[int],
        department: str,
        holiday_id: int,
        holiday_date,
        reason: str,
    ) -> None:
        self._require_manager(current_role)
        current = self._get_owned(department=department, holiday_id=holiday_id)
        day = require_iso_date(holiday_date, "Holiday date")
        reason = self._clean_reason(reason)

        clash = self._holidays.find_active_on(department=department, holiday_date=day)
        if clash and clash.holiday_id != current.holiday_id:
            raise ValidationError("Holiday already exists for this date in your department")

        self._holidays.update(holiday_id=current.holiday_id, holiday_date=day, reason=reason, updated_by=user_id)
        logger.info("Holiday updated: department=%s id=%s date=%s by=%s", department, current.holiday_id, day, user_id)

    def delete(self, *, current_role: Role, user_id: Optional[int], department: str, holiday_id: int) -> None:
        self._require_manager(current_role)
        holiday = self._get_owned(department=department, holiday_id=holiday_id)
        if not self._holidays.soft_delete(holiday_id=holiday.holiday_id, deleted_by=user_id):
            raise NotFoundError("Holiday not found")
        logger.info("Holiday deleted: department=%s date=%s by=%s", department, holiday.holiday_date, user_id)

    def list_for_department(
        self,
        department: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        year: Optional[int] = None,
    ) -> Sequence[Holiday]:
        """Active holidays in [start, end]; without both bounds, one calendar year."""
        if not (start and end):
            year = int(year) if year else today_in(self._tz).year
            start, end = date(year, 1, 1), date(year, 12, 31)
        return self._holidays.list_active(department=department, start=start, end=end)

    def active_holiday_set(
        self,
        department: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> frozenset[str]:
        holidays = self._holidays.list_active(department=department, start=start, end=end)
        return resolve_holiday_set(holidays, tz=self._tz)

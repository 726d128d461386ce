from __future__ import annotations

from datetime import date

from ..core.exceptions import ValidationError
from .datetime_utils import to_calendar_date


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} cannot exceed {max_len} characters")
    return value


def require_iso_date(value, field_name: str) -> date:
    parsed = to_calendar_date(value)
    if parsed is None:
        raise ValidationError(f"{field_name} must be a valid date (YYYY-MM-DD)")
    return parsed

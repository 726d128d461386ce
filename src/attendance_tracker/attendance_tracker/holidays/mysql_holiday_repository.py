from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository

_COLUMNS = "holiday_id, department, holiday_date, reason, created_by, updated_by, is_deleted"


def _to_holiday(r: dict) -> Holiday:
    return Holiday(
        holiday_id=int(r["holiday_id"]),
        department=r["department"],
        holiday_date=r["holiday_date"],
        reason=r["reason"],
        created_by=r.get("created_by"),
        updated_by=r.get("updated_by"),
        is_deleted=bool(r.get("is_deleted", 0)),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, *, department: str, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Holiday]:
        sql = f"SELECT {_COLUMNS} FROM holidays WHERE department=%s AND is_deleted=0"
        params: list = [department]
        if start:
            sql += " AND holiday_date >= %s"
            params.append(start)
        if end:
            sql += " AND holiday_date <= %s"
            params.append(end)
        sql += " ORDER BY holiday_date"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_holiday(r) for r in fetchall(cur)]

    def get_active_by_id(self, holiday_id: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM holidays WHERE holiday_id=%s AND is_deleted=0",
                (int(holiday_id),),
            )
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def find_active_on(self, *, department: str, holiday_date: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM holidays WHERE department=%s AND holiday_date=%s AND is_deleted=0",
                (department, holiday_date),
            )
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def create(self, *, department: str, holiday_date: date, reason: str, created_by: Optional[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays(department, holiday_date, reason, created_by)
                VALUES(%s,%s,%s,%s)
                """,
                (department, holiday_date, reason, created_by),
            )
            return int(cur.lastrowid)

    def update(self, *, holiday_id: int, holiday_date: date, reason: str, updated_by: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE holidays
                SET holiday_date=%s, reason=%s, updated_by=%s
                WHERE holiday_id=%s AND is_deleted=0
                """,
                (holiday_date, reason, updated_by, int(holiday_id)),
            )
            return cur.rowcount > 0

    def soft_delete(self, *, holiday_id: int, deleted_by: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE holidays
                SET is_deleted=1, deleted_at=NOW(), updated_by=%s
                WHERE holiday_id=%s AND is_deleted=0
                """,
                (deleted_by, int(holiday_id)),
            )
            return cur.rowcount > 0

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, set_clause, where_clause
from .model import Holiday
from .repository import HolidayRepository

_COLUMNS = "holiday_id, holiday_date, name"
_FIELD_COLUMNS = {"date": "holiday_date", "name": "name"}


def _to_holiday(r: dict) -> Holiday:
    return Holiday(holiday_id=int(r["holiday_id"]), date=r["holiday_date"], name=r["name"])


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def get_by_date(self, day: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE holiday_date=%s", (day,))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def list(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Holiday]:
        clauses: list[str] = []
        params: list[object] = []
        if start is not None:
            clauses.append("holiday_date>=%s")
            params.append(start)
        if end is not None:
            clauses.append("holiday_date<=%s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM holidays {where_clause(clauses)} ORDER BY holiday_date ASC",
                tuple(params),
            )
            return [_to_holiday(r) for r in fetchall(cur)]

    def create(self, *, day: date, name: str) -> Holiday:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO holidays (holiday_date, name) VALUES (%s, %s)", (day, name))
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE holiday_id=%s", (new_id,))
            return _to_holiday(fetchone(cur))

    def update(self, holiday_id: int, fields: dict) -> Optional[Holiday]:
        sets, params = set_clause(fields, _FIELD_COLUMNS)

        with db_cursor(self._conn_factory) as (_, cur):
            if sets:
                cur.execute(
                    f"UPDATE holidays SET {sets} WHERE holiday_id=%s",
                    (*params, int(holiday_id)),
                )
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0

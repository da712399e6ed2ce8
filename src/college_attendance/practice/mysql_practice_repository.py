from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders
from .model import PracticeDay
from .repository import PracticeDayRepository

_COLUMNS = "practice_id, group_id, practice_date, name"


def _to_practice(r: dict) -> PracticeDay:
    return PracticeDay(
        practice_id=int(r["practice_id"]),
        group_id=int(r["group_id"]),
        date=r["practice_date"],
        name=r.get("name"),
    )


class MySQLPracticeDayRepository(PracticeDayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, group_id: int, day: date) -> Optional[PracticeDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM practice_days WHERE group_id=%s AND practice_date=%s",
                (int(group_id), day),
            )
            r = fetchone(cur)
            return _to_practice(r) if r else None

    def upsert(self, *, group_id: int, day: date, name: Optional[str]) -> PracticeDay:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO practice_days (group_id, practice_date, name)
                VALUES (%s, %s, %s)
                ON DUPLICATE KEY UPDATE name=VALUES(name)
                """,
                (int(group_id), day, name),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM practice_days WHERE group_id=%s AND practice_date=%s",
                (int(group_id), day),
            )
            return _to_practice(fetchone(cur))

    def list_between(
        self,
        start: date,
        end: date,
        *,
        group_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[PracticeDay]:
        sql = f"SELECT {_COLUMNS} FROM practice_days WHERE practice_date BETWEEN %s AND %s"
        params: list[object] = [start, end]
        if group_ids is not None:
            ids = [int(i) for i in group_ids]
            if not ids:
                return []
            sql += f" AND group_id IN ({in_placeholders(ids)})"
            params.extend(ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY practice_date ASC, group_id ASC", tuple(params))
            return [_to_practice(r) for r in fetchall(cur)]

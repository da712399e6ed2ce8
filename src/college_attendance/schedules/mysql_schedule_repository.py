from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, set_clause
from .model import GroupSchedule, LessonSlot
from .repository import GroupScheduleRepository, LessonSlotRepository

_SELECT = """
    SELECT sc.schedule_id, sc.group_id, sc.day_of_week, sc.start_time, sc.end_time, g.name AS group_name
    FROM group_schedules sc
    LEFT JOIN student_groups g ON g.group_id = sc.group_id
"""
_UPDATABLE = ("group_id", "day_of_week", "start_time", "end_time")


def _to_schedule(r: dict) -> GroupSchedule:
    return GroupSchedule(
        schedule_id=int(r["schedule_id"]),
        group_id=int(r["group_id"]),
        day_of_week=int(r["day_of_week"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r.get("end_time")),
        group_name=r.get("group_name"),
    )


class MySQLGroupScheduleRepository(GroupScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[GroupSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE sc.schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def get_for_group_and_day(self, group_id: int, day_of_week: int) -> Optional[GroupSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE sc.group_id=%s AND sc.day_of_week=%s", (int(group_id), int(day_of_week)))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def list(self, *, group_id: Optional[int] = None) -> Sequence[GroupSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            if group_id is None:
                cur.execute(f"{_SELECT} ORDER BY sc.group_id ASC, sc.day_of_week ASC")
            else:
                cur.execute(f"{_SELECT} WHERE sc.group_id=%s ORDER BY sc.day_of_week ASC", (int(group_id),))
            return [_to_schedule(r) for r in fetchall(cur)]

    def create(self, *, group_id: int, day_of_week: int, start_time, end_time) -> GroupSchedule:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO group_schedules (group_id, day_of_week, start_time, end_time) VALUES (%s, %s, %s, %s)",
                (int(group_id), int(day_of_week), start_time, end_time),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"{_SELECT} WHERE sc.schedule_id=%s", (new_id,))
            return _to_schedule(fetchone(cur))

    def update(self, schedule_id: int, fields: dict) -> Optional[GroupSchedule]:
        sets, params = set_clause(fields, _UPDATABLE)

        with db_cursor(self._conn_factory) as (_, cur):
            if sets:
                cur.execute(
                    f"UPDATE group_schedules SET {sets} WHERE schedule_id=%s",
                    (*params, int(schedule_id)),
                )
            cur.execute(f"{_SELECT} WHERE sc.schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def delete(self, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM group_schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0


class MySQLLessonSlotRepository(LessonSlotRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(self, *, day_of_week: Optional[int] = None) -> Sequence[LessonSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            if day_of_week is None:
                cur.execute(
                    "SELECT day_of_week, pair_number, start_time, end_time FROM lesson_slots "
                    "ORDER BY day_of_week ASC, pair_number ASC"
                )
            else:
                cur.execute(
                    "SELECT day_of_week, pair_number, start_time, end_time FROM lesson_slots "
                    "WHERE day_of_week=%s ORDER BY pair_number ASC",
                    (int(day_of_week),),
                )
            return [
                LessonSlot(
                    day_of_week=int(r["day_of_week"]),
                    pair_number=int(r["pair_number"]),
                    start_time=normalize_mysql_time(r["start_time"]),
                    end_time=normalize_mysql_time(r["end_time"]),
                )
                for r in fetchall(cur)
            ]

    def upsert_many(self, slots: Iterable[LessonSlot]) -> int:
        rows = [(s.day_of_week, s.pair_number, s.start_time, s.end_time) for s in slots]
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO lesson_slots (day_of_week, pair_number, start_time, end_time)
                VALUES (%s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE start_time=VALUES(start_time), end_time=VALUES(end_time)
                """,
                rows,
            )
            return len(rows)

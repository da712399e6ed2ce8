from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders, set_clause
from .model import Student
from .repository import StudentRepository

_SELECT = """
    SELECT s.student_id, s.full_name, s.group_id, s.user_id, g.name AS group_name
    FROM students s
    LEFT JOIN student_groups g ON g.group_id = s.group_id
"""
_UPDATABLE = ("full_name", "group_id", "user_id")


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        full_name=r["full_name"],
        group_id=int(r["group_id"]),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        group_name=r.get("group_name"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} LIMIT 1", params)
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._get_one("s.student_id=%s", (int(student_id),))

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        return self._get_one("s.user_id=%s", (int(user_id),))

    def find_by_full_name(self, full_name: str) -> Optional[Student]:
        return self._get_one("s.full_name=%s", (full_name,))

    def list(self, *, group_id: Optional[int] = None) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            if group_id is None:
                cur.execute(f"{_SELECT} ORDER BY g.name ASC, s.full_name ASC")
            else:
                cur.execute(f"{_SELECT} WHERE s.group_id=%s ORDER BY s.full_name ASC", (int(group_id),))
            return [_to_student(r) for r in fetchall(cur)]

    def list_by_group_ids(self, group_ids: Iterable[int]) -> Sequence[Student]:
        ids = [int(i) for i in group_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE s.group_id IN ({in_placeholders(ids)}) ORDER BY g.name ASC, s.full_name ASC",
                tuple(ids),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def create(self, *, full_name: str, group_id: int, user_id: Optional[int] = None) -> Student:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO students (full_name, group_id, user_id) VALUES (%s, %s, %s)",
                (full_name, int(group_id), user_id),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"{_SELECT} WHERE s.student_id=%s", (new_id,))
            return _to_student(fetchone(cur))

    def create_many(self, rows: Iterable[Tuple[str, int]]) -> int:
        values = [(name, int(group_id)) for name, group_id in rows]
        if not values:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany("INSERT INTO students (full_name, group_id) VALUES (%s, %s)", values)
            return int(cur.rowcount)

    def update(self, student_id: int, fields: dict) -> Optional[Student]:
        sets, params = set_clause(fields, _UPDATABLE)

        with db_cursor(self._conn_factory) as (_, cur):
            if sets:
                cur.execute(f"UPDATE students SET {sets} WHERE student_id=%s", (*params, int(student_id)))
            cur.execute(f"{_SELECT} WHERE s.student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def delete(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0

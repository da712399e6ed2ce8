from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders, set_clause
from .model import Group
from .repository import GroupRepository

_SELECT = """
    SELECT
        g.group_id, g.name, g.admission_year, g.course, g.specialty_id, g.curator_id,
        sp.code AS specialty_code, sp.name AS specialty_name,
        u.full_name AS curator_name
    FROM student_groups g
    LEFT JOIN specialties sp ON sp.specialty_id = g.specialty_id
    LEFT JOIN users u ON u.user_id = g.curator_id
"""
_UPDATABLE = ("name", "admission_year", "course", "specialty_id", "curator_id")


def _to_group(r: dict) -> Group:
    return Group(
        group_id=int(r["group_id"]),
        name=r["name"],
        admission_year=int(r["admission_year"]),
        course=int(r["course"]),
        specialty_id=int(r["specialty_id"]),
        curator_id=int(r["curator_id"]) if r.get("curator_id") is not None else None,
        specialty_code=r.get("specialty_code"),
        specialty_name=r.get("specialty_name"),
        curator_name=r.get("curator_name"),
    )


class MySQLGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where}", params)
            r = fetchone(cur)
            return _to_group(r) if r else None

    def get_by_id(self, group_id: int) -> Optional[Group]:
        return self._get_one("g.group_id=%s", (int(group_id),))

    def get_by_name(self, name: str) -> Optional[Group]:
        return self._get_one("g.name=%s", (name,))

    def get_by_curator(self, curator_id: int) -> Optional[Group]:
        return self._get_one("g.curator_id=%s", (int(curator_id),))

    def list_all(self) -> Sequence[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY g.name ASC")
            return [_to_group(r) for r in fetchall(cur)]

    def list_by_ids(self, group_ids: Iterable[int]) -> Sequence[Group]:
        ids = [int(i) for i in group_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE g.group_id IN ({in_placeholders(ids)}) ORDER BY g.name ASC", tuple(ids))
            return [_to_group(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        admission_year: int,
        course: int,
        specialty_id: int,
        curator_id: Optional[int],
    ) -> Group:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO student_groups (name, admission_year, course, specialty_id, curator_id)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (name, int(admission_year), int(course), int(specialty_id), curator_id),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"{_SELECT} WHERE g.group_id=%s", (new_id,))
            return _to_group(fetchone(cur))

    def update(self, group_id: int, fields: dict) -> Optional[Group]:
        sets, params = set_clause(fields, _UPDATABLE)

        with db_cursor(self._conn_factory) as (_, cur):
            if sets:
                cur.execute(f"UPDATE student_groups SET {sets} WHERE group_id=%s", (*params, int(group_id)))
            cur.execute(f"{_SELECT} WHERE g.group_id=%s", (int(group_id),))
            r = fetchone(cur)
            return _to_group(r) if r else None

    def delete(self, group_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM student_groups WHERE group_id=%s", (int(group_id),))
            return cur.rowcount > 0

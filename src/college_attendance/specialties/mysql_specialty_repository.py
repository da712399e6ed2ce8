from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, set_clause
from .model import Specialty
from .repository import SpecialtyRepository

_COLUMNS = "specialty_id, code, name, duration_years"
_UPDATABLE = ("code", "name", "duration_years")


def _to_specialty(r: dict) -> Specialty:
    return Specialty(
        specialty_id=int(r["specialty_id"]),
        code=r["code"],
        name=r["name"],
        duration_years=int(r["duration_years"]),
    )


class MySQLSpecialtyRepository(SpecialtyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, specialty_id: int) -> Optional[Specialty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM specialties WHERE specialty_id=%s", (int(specialty_id),))
            r = fetchone(cur)
            return _to_specialty(r) if r else None

    def get_by_code(self, code: str) -> Optional[Specialty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM specialties WHERE code=%s", (code,))
            r = fetchone(cur)
            return _to_specialty(r) if r else None

    def list_all(self) -> Sequence[Specialty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM specialties ORDER BY code ASC")
            return [_to_specialty(r) for r in fetchall(cur)]

    def create(self, *, code: str, name: str, duration_years: int) -> Specialty:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO specialties (code, name, duration_years) VALUES (%s, %s, %s)",
                (code, name, int(duration_years)),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM specialties WHERE specialty_id=%s", (new_id,))
            return _to_specialty(fetchone(cur))

    def update(self, specialty_id: int, fields: dict) -> Optional[Specialty]:
        sets, params = set_clause(fields, _UPDATABLE)

        with db_cursor(self._conn_factory) as (_, cur):
            if sets:
                cur.execute(
                    f"UPDATE specialties SET {sets} WHERE specialty_id=%s",
                    (*params, int(specialty_id)),
                )
            cur.execute(f"SELECT {_COLUMNS} FROM specialties WHERE specialty_id=%s", (int(specialty_id),))
            r = fetchone(cur)
            return _to_specialty(r) if r else None

    def delete(self, specialty_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM specialties WHERE specialty_id=%s", (int(specialty_id),))
            return cur.rowcount > 0

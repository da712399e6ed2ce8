from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders, set_clause
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, login, full_name, password_hash, role, created_at"
_UPDATABLE = ("login", "full_name", "password_hash", "role")


def _to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        login=r["login"],
        full_name=r.get("full_name"),
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        created_at=r.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def get_by_login(self, login: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE login=%s", (login,))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def list_all(self, *, roles: Optional[Iterable[Role]] = None) -> Sequence[User]:
        params: tuple = ()
        where = ""
        if roles:
            values = [r.value for r in roles]
            where = f"WHERE role IN ({in_placeholders(values)})"
            params = tuple(values)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users {where} ORDER BY full_name ASC, login ASC", params)
            return [_to_user(r) for r in fetchall(cur)]

    def create(self, *, login: str, full_name: Optional[str], password_hash: str, role: Role) -> User:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO users (login, full_name, password_hash, role) VALUES (%s, %s, %s, %s)",
                (login, full_name, password_hash, role.value),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (new_id,))
            return _to_user(fetchone(cur))

    def update(self, user_id: int, fields: dict) -> Optional[User]:
        sets, params = set_clause(fields, _UPDATABLE)

        with db_cursor(self._conn_factory) as (_, cur):
            if sets:
                cur.execute(f"UPDATE users SET {sets} WHERE user_id=%s", (*params, int(user_id)))
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def delete(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

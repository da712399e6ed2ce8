from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import QRToken
from .repository import QRTokenRepository


class MySQLQRTokenRepository(QRTokenRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, token: str) -> Optional[QRToken]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT token, teacher_id, lesson_id, expires_at FROM qr_tokens WHERE token=%s", (token,))
            r = fetchone(cur)
            if not r:
                return None
            return QRToken(
                token=r["token"],
                teacher_id=int(r["teacher_id"]),
                lesson_id=int(r["lesson_id"]),
                expires_at=r["expires_at"],
            )

    def create(self, *, token: str, teacher_id: int, lesson_id: int, expires_at: datetime) -> QRToken:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO qr_tokens (token, teacher_id, lesson_id, expires_at) VALUES (%s, %s, %s, %s)",
                (token, int(teacher_id), int(lesson_id), expires_at),
            )
        return QRToken(token=token, teacher_id=int(teacher_id), lesson_id=int(lesson_id), expires_at=expires_at)

    def delete_for_lesson(self, teacher_id: int, lesson_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM qr_tokens WHERE teacher_id=%s AND lesson_id=%s",
                (int(teacher_id), int(lesson_id)),
            )
            return int(cur.rowcount)

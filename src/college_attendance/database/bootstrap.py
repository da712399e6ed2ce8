from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

_COMMENT_LINE = re.compile(r"(?m)^\s*--.*$")


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql must work for whatever database name DB_CONFIG points at.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return _COMMENT_LINE.sub("", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema file on ';' that sit outside quoted literals."""

    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
            continue
        if ch == "\\" and quote:
            escape = True
            continue
        if ch in ("'", '"', "`"):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
            continue
        if ch == ";" and quote is None:
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Apply schema.sql (idempotent CREATE TABLE IF NOT EXISTS). Returns statement count."""

    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    applied = 0
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            applied += 1
        conn.commit()
    finally:
        conn.close()

    logger.info("schema applied (%s statements) from %s", applied, schema_path)
    return applied


def ensure_demo_admin(db_config: dict, *, login: str = "admin", password: str = "admin123") -> None:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash(password)
        cur.execute("SELECT user_id FROM users WHERE login=%s", (login,))
        if cur.fetchone():
            cur.execute(
                "UPDATE users SET password_hash=%s, role=%s WHERE login=%s",
                (password_hash, Role.ADMIN.value, login),
            )
        else:
            cur.execute(
                "INSERT INTO users (login, full_name, password_hash, role) VALUES (%s, %s, %s, %s)",
                (login, "Администратор", password_hash, Role.ADMIN.value),
            )
        conn.commit()
    finally:
        conn.close()

    logger.info("demo admin %r ready", login)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

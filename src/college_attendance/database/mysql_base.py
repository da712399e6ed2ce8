from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One short-lived connection per unit of work; commit on success, rollback on error."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def where_clause(clauses: List[str]) -> str:
    return f"WHERE {' AND '.join(clauses)}" if clauses else ""


def in_placeholders(values: Sequence[Any]) -> str:
    return ",".join(["%s"] * len(values))


def set_clause(fields: Mapping[str, Any], columns: Union[Mapping[str, str], Sequence[str]]) -> Tuple[str, list]:
    """``col=%s, ...`` and its params for the keys of ``fields`` that are updatable.

    ``columns`` is either a field -> column mapping or a tuple of names used as is.
    Enum values are stored by value.
    """
    keys = [k for k in columns if k in fields]
    names = [columns[k] if isinstance(columns, Mapping) else k for k in keys]
    params = [fields[k].value if isinstance(fields[k], Enum) else fields[k] for k in keys]
    return ", ".join(f"{name}=%s" for name in names), params


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns come back as time, timedelta or 'HH:MM[:SS]' depending on the connector."""
    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(hour=seconds // 3600, minute=seconds % 3600 // 60, second=seconds % 60)

    if isinstance(value, str):
        parts = [int(p) for p in value.strip().split(":") if p]
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        return time(*parts[:3])

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders, where_clause
from .model import AttendanceFilter, AttendanceLogRow, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "attendance_id, student_id, group_id, attendance_date, status, "
    "updated_at, updated_by_id, marked_at, late_minutes"
)
_ARCHIVE_NAME = re.compile(r"^attendance_archive_\d{4}_\d{4}$")


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        group_id=int(r["group_id"]),
        date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        updated_at=r.get("updated_at"),
        updated_by_id=r.get("updated_by_id"),
        marked_at=r.get("marked_at"),
        late_minutes=r.get("late_minutes"),
    )


def _filter_clauses(flt: AttendanceFilter, prefix: str = "") -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if flt.group_id is not None:
        clauses.append(f"{prefix}group_id=%s")
        params.append(int(flt.group_id))
    if flt.student_id is not None:
        clauses.append(f"{prefix}student_id=%s")
        params.append(int(flt.student_id))
    if flt.start is not None:
        clauses.append(f"{prefix}attendance_date>=%s")
        params.append(flt.start)
    if flt.end is not None:
        clauses.append(f"{prefix}attendance_date<=%s")
        params.append(flt.end)
    return clauses, params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_student_and_date(self, student_id: int, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s AND attendance_date=%s",
                (int(student_id), day),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list(self, flt: AttendanceFilter) -> Sequence[AttendanceRecord]:
        clauses, params = _filter_clauses(flt)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                {where_clause(clauses)}
                ORDER BY attendance_date DESC, attendance_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_log(self, flt: AttendanceFilter) -> Sequence[AttendanceLogRow]:
        clauses, params = _filter_clauses(flt, prefix="ar.")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    ar.attendance_id, ar.student_id, ar.group_id, ar.status,
                    ar.attendance_date, ar.updated_at,
                    s.full_name, g.name AS group_name,
                    u.full_name AS updated_by
                FROM attendance_records ar
                JOIN students s ON s.student_id = ar.student_id
                JOIN student_groups g ON g.group_id = ar.group_id
                LEFT JOIN users u ON u.user_id = ar.updated_by_id
                {where_clause(clauses)}
                ORDER BY ar.attendance_date DESC, s.full_name ASC
                """,
                tuple(params),
            )
            return [
                AttendanceLogRow(
                    attendance_id=int(r["attendance_id"]),
                    student_id=int(r["student_id"]),
                    group_id=int(r["group_id"]),
                    full_name=r["full_name"],
                    group_name=r["group_name"],
                    status=AttendanceStatus(r["status"]),
                    date=r["attendance_date"],
                    updated_at=r.get("updated_at"),
                    updated_by=r.get("updated_by"),
                )
                for r in fetchall(cur)
            ]

    def list_for_students(self, student_ids: Iterable[int], *, start: date, end: date) -> Sequence[AttendanceRecord]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id IN ({in_placeholders(ids)}) AND attendance_date BETWEEN %s AND %s
                ORDER BY attendance_id ASC
                """,
                (*ids, start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        student_id: int,
        group_id: int,
        day: date,
        status: AttendanceStatus,
        updated_by_id: Optional[int],
        marked_at: Optional[datetime] = None,
        late_minutes: Optional[int] = None,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records
                    (student_id, group_id, attendance_date, status, updated_by_id, marked_at, late_minutes)
                VALUES (%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(student_id), int(group_id), day, status.value, updated_by_id, marked_at, late_minutes),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (new_id,))
            return _to_record(fetchone(cur))

    def update(
        self,
        attendance_id: int,
        *,
        status: AttendanceStatus,
        updated_by_id: Optional[int],
        marked_at: Optional[datetime],
        late_minutes: Optional[int],
        day: Optional[date] = None,
        student_id: Optional[int] = None,
        group_id: Optional[int] = None,
    ) -> Optional[AttendanceRecord]:
        sets = ["status=%s", "updated_by_id=%s", "marked_at=%s", "late_minutes=%s"]
        params: list[object] = [status.value, updated_by_id, marked_at, late_minutes]
        if day is not None:
            sets.append("attendance_date=%s")
            params.append(day)
        if student_id is not None:
            sets.append("student_id=%s")
            params.append(int(student_id))
        if group_id is not None:
            sets.append("group_id=%s")
            params.append(int(group_id))
        params.append(int(attendance_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE attendance_records SET {', '.join(sets)} WHERE attendance_id=%s", tuple(params))
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def archive_all(self, archive_table: str) -> int:
        if not _ARCHIVE_NAME.match(archive_table):
            raise ValueError(f"Invalid archive table name: {archive_table!r}")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"CREATE TABLE IF NOT EXISTS `{archive_table}` LIKE attendance_records")
            cur.execute(f"INSERT INTO `{archive_table}` SELECT * FROM attendance_records")
            archived = int(cur.rowcount)
            cur.execute("DELETE FROM attendance_records")
            return archived

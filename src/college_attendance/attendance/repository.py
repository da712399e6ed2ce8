from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceFilter, AttendanceLogRow, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_student_and_date(self, student_id: int, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list(self, flt: AttendanceFilter) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_log(self, flt: AttendanceFilter) -> Sequence[AttendanceLogRow]:
        raise NotImplementedError

    def list_for_students(self, student_ids: Iterable[int], *, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

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
        raise NotImplementedError

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
        """Overwrite status fields; returns the stored record or None when missing."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def archive_all(self, archive_table: str) -> int:
        """Copy every record into ``archive_table`` and empty the live table."""

        raise NotImplementedError

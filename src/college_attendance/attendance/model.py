from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Доменная сущность: отметка посещаемости студента за день."""

    attendance_id: int
    student_id: int
    group_id: int
    date: date
    status: AttendanceStatus
    updated_at: Optional[datetime] = None
    updated_by_id: Optional[int] = None
    marked_at: Optional[datetime] = None
    late_minutes: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "groupId": self.group_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "updatedById": self.updated_by_id,
            "markedAt": self.marked_at.isoformat() if self.marked_at else None,
            "lateMinutes": self.late_minutes,
        }


@dataclass(frozen=True)
class AttendanceLogRow:
    """Read-model for the journal log (joined with student, group and editor)."""

    attendance_id: int
    student_id: int
    group_id: int
    full_name: str
    group_name: str
    status: AttendanceStatus
    date: date
    updated_at: Optional[datetime]
    updated_by: Optional[str]

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "groupId": self.group_id,
            "fullName": self.full_name,
            "groupName": self.group_name,
            "status": self.status.value,
            "date": self.date.isoformat(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "updatedBy": self.updated_by or "Система",
        }


@dataclass(frozen=True)
class AttendanceFilter:
    group_id: Optional[int] = None
    student_id: Optional[int] = None
    start: Optional[date] = None
    end: Optional[date] = None

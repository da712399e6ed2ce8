from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

from ..common.datetime_utils import (
    DateRange,
    is_weekend,
    parse_request_date,
    parse_request_datetime,
    resolve_range,
)
from ..common.validators import require_int
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import AttendanceStatus, RangeType
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from ..holidays.repository import HolidayRepository
from ..schedules.service import ScheduleService
from ..students.model import Student
from ..students.repository import StudentRepository
from ..users.model import User
from .model import AttendanceFilter, AttendanceLogRow, AttendanceRecord
from .repository import AttendanceRepository
from .rules import MAX_PERCENT, calculate_attendance, round_half_up

logger = logging.getLogger(__name__)

# REMOTE is stored as its own status but counts as IT-hub attendance.
_CALCULATION_ALIASES = {AttendanceStatus.REMOTE: AttendanceStatus.ITHUB}

# "today" summary: these count as present among the marked students.
_TODAY_PRESENT = frozenset(
    {
        AttendanceStatus.PRESENT,
        AttendanceStatus.VALID_ABSENT,
        AttendanceStatus.ITHUB,
        AttendanceStatus.DUAL,
        AttendanceStatus.LATE,
    }
)


@dataclass(frozen=True)
class DayStatus:
    date: date
    status: AttendanceStatus


def calculation_input(records: Iterable[AttendanceRecord]) -> list[DayStatus]:
    """Records as (date, status) pairs ready for calculate_attendance, input order kept."""
    return [DayStatus(r.date, _CALCULATION_ALIASES.get(r.status, r.status)) for r in records]


def parse_status(value: Any) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value).upper())
    except ValueError:
        raise ValidationError(f"Неизвестный статус: {value}")


@dataclass(frozen=True)
class BatchResult:
    created: int
    updated: int
    errors: list[str]

    def to_dict(self) -> dict:
        data: dict = {"created": self.created, "updated": self.updated}
        if self.errors:
            data["errors"] = self.errors
        return data


class AttendanceService:
    """Use cases around the daily attendance journal.

    Marks are one row per student and day. Percentages are never stored:
    they are computed on demand with ``calculate_attendance``.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        groups: GroupRepository,
        holidays: HolidayRepository,
        schedule_service: ScheduleService,
        *,
        clock: Callable[[], datetime],
        timezone: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._students = students
        self._groups = groups
        self._holidays = holidays
        self._schedule_service = schedule_service
        self._clock = clock
        self._timezone = timezone

    # --- validation helpers -------------------------------------------------

    def _ensure_school_day(self, day: date) -> None:
        if is_weekend(day):
            raise ValidationError("Нельзя отметить посещаемость в выходной день")
        if self._holidays.get_by_date(day):
            raise ValidationError("Нельзя отметить посещаемость в праздничный день")

    def _student_in_group(self, student_id: int, group_id: int) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise ValidationError("Студент не найден")
        if not self._groups.get_by_id(group_id):
            raise ValidationError("Группа не найдена")
        if student.group_id != group_id:
            raise ValidationError("Студент не принадлежит указанной группе")
        return student

    def _marked_at(self, value: Any) -> datetime:
        if value in (None, ""):
            return self._clock()
        return parse_request_datetime(value, "markedAt", self._timezone)

    def _late_fields(
        self,
        status: AttendanceStatus,
        *,
        group_id: int,
        day: date,
        marked_at: Any = None,
        late_minutes: Any = None,
    ) -> Tuple[Optional[datetime], Optional[int]]:
        """(marked_at, late_minutes) to store; both None for any status but LATE."""
        if status != AttendanceStatus.LATE:
            return None, None

        stamp = self._marked_at(marked_at)
        if late_minutes is not None:
            return stamp, require_int(late_minutes, "lateMinutes")
        return stamp, self._schedule_service.late_minutes(group_id, day, stamp)

    # --- commands -----------------------------------------------------------

    def mark(self, payload: dict, *, updated_by_id: Optional[int]) -> Tuple[AttendanceRecord, bool]:
        """Create or overwrite the mark of one student for one day.

        Returns the stored record and whether it was newly created.
        """
        if not all(payload.get(k) for k in ("studentId", "groupId", "date", "status")):
            raise ValidationError("studentId, groupId, date и status обязательны")

        student_id = require_int(payload["studentId"], "studentId")
        group_id = require_int(payload["groupId"], "groupId")
        status = parse_status(payload["status"])
        day = parse_request_date(payload["date"], "date")

        self._student_in_group(student_id, group_id)
        self._ensure_school_day(day)

        marked_at, late_minutes = self._late_fields(
            status,
            group_id=group_id,
            day=day,
            marked_at=payload.get("markedAt"),
            late_minutes=payload.get("lateMinutes"),
        )

        existing = self._attendance.get_for_student_and_date(student_id, day)
        if existing:
            record = self._attendance.update(
                existing.attendance_id,
                status=status,
                updated_by_id=updated_by_id,
                marked_at=marked_at,
                late_minutes=late_minutes,
            )
            return record, False

        record = self._attendance.create(
            student_id=student_id,
            group_id=group_id,
            day=day,
            status=status,
            updated_by_id=updated_by_id,
            marked_at=marked_at,
            late_minutes=late_minutes,
        )
        return record, True

    def mark_batch(self, records: Any, *, updated_by_id: Optional[int]) -> BatchResult:
        if not isinstance(records, list) or not records:
            raise ValidationError("records должен быть непустым массивом")

        created = updated = 0
        errors: list[str] = []
        for item in records:
            if not isinstance(item, dict):
                errors.append(f"Неполные данные: {item!r}")
                continue
            label = f"{item.get('studentId')} / {item.get('date')}"
            try:
                _, is_new = self.mark(item, updated_by_id=updated_by_id)
            except DomainError as e:
                errors.append(f"{label}: {e}")
                continue
            except Exception as e:
                logger.exception("batch mark failed for %s", label)
                errors.append(f"{label}: {e}")
                continue

            if is_new:
                created += 1
            else:
                updated += 1

        logger.info("batch mark: created=%s updated=%s errors=%s", created, updated, len(errors))
        return BatchResult(created=created, updated=updated, errors=errors)

    def get(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Запись посещаемости не найдена")
        return record

    def update(self, attendance_id: int, payload: dict, *, updated_by_id: Optional[int]) -> AttendanceRecord:
        """Full update: ``status`` is required, date/student/group may be moved."""
        if not payload.get("status"):
            raise ValidationError("status обязателен")
        status = parse_status(payload["status"])

        current = self.get(attendance_id)
        day = parse_request_date(payload["date"], "date") if payload.get("date") else current.date
        student_id = require_int(payload["studentId"], "studentId") if payload.get("studentId") else None
        group_id = require_int(payload["groupId"], "groupId") if payload.get("groupId") else None

        final_group = group_id or current.group_id
        if student_id is not None or group_id is not None:
            self._student_in_group(student_id or current.student_id, final_group)
        self._ensure_school_day(day)

        marked_at, late_minutes = self._late_fields(
            status,
            group_id=final_group,
            day=day,
            marked_at=payload.get("markedAt"),
            late_minutes=payload.get("lateMinutes"),
        )
        record = self._attendance.update(
            attendance_id,
            status=status,
            updated_by_id=updated_by_id,
            marked_at=marked_at,
            late_minutes=late_minutes,
            day=day if payload.get("date") else None,
            student_id=student_id,
            group_id=group_id,
        )
        if not record:
            raise NotFoundError("Запись посещаемости не найдена")
        return record

    def patch(self, attendance_id: int, payload: dict, *, updated_by_id: Optional[int]) -> AttendanceRecord:
        """Partial update of status and/or the LATE timestamp."""
        if payload.get("status") is None and payload.get("markedAt") is None:
            raise ValidationError("Нет данных для обновления")

        current = self.get(attendance_id)
        self._ensure_school_day(current.date)

        status = parse_status(payload["status"]) if payload.get("status") is not None else current.status
        if status == AttendanceStatus.LATE or payload.get("status") is not None:
            marked_at, late_minutes = self._late_fields(
                status,
                group_id=current.group_id,
                day=current.date,
                marked_at=payload.get("markedAt"),
                late_minutes=payload.get("lateMinutes"),
            )
        else:
            marked_at, late_minutes = current.marked_at, current.late_minutes

        record = self._attendance.update(
            attendance_id,
            status=status,
            updated_by_id=updated_by_id,
            marked_at=marked_at,
            late_minutes=late_minutes,
        )
        if not record:
            raise NotFoundError("Запись посещаемости не найдена")
        return record

    def delete(self, attendance_id: int) -> None:
        if not self._attendance.delete(attendance_id):
            raise NotFoundError("Запись посещаемости не найдена")

    def mark_present_via_qr(self, user: User) -> AttendanceRecord:
        """Today's mark of the student behind ``user`` set to PRESENT."""
        student = self._students.get_by_user_id(user.user_id)
        if not student and user.full_name:
            student = self._students.find_by_full_name(user.full_name)
        if not student:
            raise ValidationError("Студент не найден для этого аккаунта")

        now = self._clock()
        today = now.date()
        existing = self._attendance.get_for_student_and_date(student.student_id, today)
        if existing:
            record = self._attendance.update(
                existing.attendance_id,
                status=AttendanceStatus.PRESENT,
                updated_by_id=user.user_id,
                marked_at=now,
                late_minutes=None,
            )
        else:
            record = self._attendance.create(
                student_id=student.student_id,
                group_id=student.group_id,
                day=today,
                status=AttendanceStatus.PRESENT,
                updated_by_id=user.user_id,
                marked_at=now,
            )
        logger.info("qr check-in: student=%s date=%s", student.student_id, today)
        return record

    # --- queries ------------------------------------------------------------

    def list(self, flt: AttendanceFilter) -> Sequence[AttendanceRecord]:
        return self._attendance.list(flt)

    def log(self, flt: AttendanceFilter) -> Sequence[AttendanceLogRow]:
        return self._attendance.list_log(flt)

    def resolve(self, kind: RangeType, start: Optional[str] = None, end: Optional[str] = None) -> DateRange:
        return resolve_range(kind, today=self._clock().date(), start=start, end=end)

    def _holiday_dates(self, period: DateRange) -> list[date]:
        return [h.date for h in self._holidays.list(start=period.start, end=period.end)]

    def student_percent(
        self,
        student_id: int,
        kind: RangeType,
        *,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> dict:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Студент не найден")

        period = self.resolve(kind, start, end)
        records = self._attendance.list_for_students([student_id], start=period.start, end=period.end)
        stats = calculate_attendance(
            calculation_input(records), self._holiday_dates(period), period.start, period.end
        )
        return {
            "studentId": student.student_id,
            "fullName": student.full_name,
            "group": student.group_name,
            **stats.to_dict(),
            "period": period.label(kind),
        }

    def _today_percent(self, records: Sequence[AttendanceRecord], students_count: int) -> int:
        if students_count == 0:
            return MAX_PERCENT
        if not records:
            return 0

        present = absent = 0
        for r in records:
            status = _CALCULATION_ALIASES.get(r.status, r.status)
            if status in _TODAY_PRESENT:
                present += 1
            elif status == AttendanceStatus.ABSENT:
                absent += 1
        total = present + absent
        return round_half_up(present / total * 100) if total else 0

    def group_summary(self, kind: RangeType, *, start: Optional[str] = None, end: Optional[str] = None) -> dict:
        """Per-group percentages with the average, best and worst group.

        For ``today`` only students already marked are counted. For longer
        periods each student's percentage is calculated and the group gets the
        mean of its students.
        """
        period = self.resolve(kind, start, end)
        holidays = self._holiday_dates(period)
        groups = self._groups.list_all()
        students = self._students.list_by_group_ids([g.group_id for g in groups])
        records = self._attendance.list_for_students(
            [s.student_id for s in students], start=period.start, end=period.end
        )

        records_by_student: dict[int, list[AttendanceRecord]] = {}
        for r in records:
            records_by_student.setdefault(r.student_id, []).append(r)

        summary: list[dict] = []
        for group in groups:
            members = [s for s in students if s.group_id == group.group_id]
            if kind == RangeType.TODAY:
                marked = [r for s in members for r in records_by_student.get(s.student_id, [])]
                percent = self._today_percent(marked, len(members))
            elif members:
                percents = [
                    calculate_attendance(
                        calculation_input(records_by_student.get(s.student_id, [])),
                        holidays,
                        period.start,
                        period.end,
                    ).percent
                    for s in members
                ]
                percent = round_half_up(sum(percents) / len(percents))
            else:
                percent = MAX_PERCENT

            summary.append(
                {
                    "groupId": group.group_id,
                    "groupName": group.name,
                    "curatorId": group.curator_id,
                    "percent": percent,
                    "studentsCount": len(members),
                }
            )

        ranked = sorted(summary, key=lambda g: g["percent"], reverse=True)
        average = round_half_up(sum(g["percent"] for g in ranked) / len(ranked)) if ranked else MAX_PERCENT
        return {
            "period": period.label(kind),
            "start": period.start.isoformat(),
            "end": period.end.isoformat(),
            "averagePercent": average,
            "bestGroup": ranked[0] if ranked else None,
            "worstGroup": ranked[-1] if ranked else None,
            "groups": ranked,
        }

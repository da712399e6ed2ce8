from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.rules import round_half_up
from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_int
from ..core.exceptions import NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from .model import GroupSchedule, LessonSlot
from .repository import GroupScheduleRepository, LessonSlotRepository

logger = logging.getLogger(__name__)

_MONDAY_PAIRS = (
    ("07:45", "08:05"),  # классный час
    ("08:10", "09:40"),
    ("09:50", "11:20"),
    ("11:40", "13:10"),
    ("13:15", "14:45"),
    ("15:05", "16:35"),
    ("16:40", "18:10"),
    ("18:15", "19:45"),
)
_WEEKDAY_PAIRS = (
    ("07:45", "09:15"),
    ("09:25", "10:55"),
    ("11:15", "12:45"),
    ("12:50", "14:20"),
    ("14:40", "16:10"),
    ("16:15", "17:45"),
    ("17:50", "19:20"),
)


def default_lesson_slots() -> list[LessonSlot]:
    """The college bell schedule: Monday starts with pair 0, Tue-Fri with pair 1."""
    slots = [
        LessonSlot(1, number, parse_hhmm(start, "startTime"), parse_hhmm(end, "endTime"))
        for number, (start, end) in enumerate(_MONDAY_PAIRS)
    ]
    for day in range(2, 6):
        slots.extend(
            LessonSlot(day, number, parse_hhmm(start, "startTime"), parse_hhmm(end, "endTime"))
            for number, (start, end) in enumerate(_WEEKDAY_PAIRS, start=1)
        )
    return slots


def _day_of_week(value) -> int:
    day = require_int(value, "dayOfWeek")
    if day < 1 or day > 5:
        raise ValidationError("dayOfWeek должен быть от 1 до 5 (понедельник-пятница)")
    return day


class ScheduleService:
    """Weekly start times per group; source of late minutes for LATE marks."""

    def __init__(self, schedules: GroupScheduleRepository, groups: GroupRepository):
        self._schedules = schedules
        self._groups = groups

    def list(self, *, group_id: Optional[int] = None) -> Sequence[GroupSchedule]:
        return self._schedules.list(group_id=group_id)

    def get(self, schedule_id: int) -> GroupSchedule:
        schedule = self._schedules.get_by_id(schedule_id)
        if not schedule:
            raise NotFoundError("Расписание не найдено")
        return schedule

    def _group_id(self, value) -> int:
        group_id = require_int(value, "groupId")
        if not self._groups.get_by_id(group_id):
            raise ValidationError("Группа не найдена")
        return group_id

    def _ensure_free(self, group_id: int, day_of_week: int, *, schedule_id: Optional[int] = None) -> None:
        other = self._schedules.get_for_group_and_day(group_id, day_of_week)
        if other and other.schedule_id != schedule_id:
            raise ValidationError("Расписание для этой группы и дня недели уже существует")

    def create(self, payload: dict) -> GroupSchedule:
        if not payload.get("groupId") or not payload.get("dayOfWeek") or not payload.get("startTime"):
            raise ValidationError("groupId, dayOfWeek и startTime обязательны")

        day = _day_of_week(payload["dayOfWeek"])
        start_time = parse_hhmm(payload["startTime"], "startTime")
        end_time = parse_hhmm(payload["endTime"], "endTime") if payload.get("endTime") else None
        group_id = self._group_id(payload["groupId"])
        self._ensure_free(group_id, day)

        return self._schedules.create(group_id=group_id, day_of_week=day, start_time=start_time, end_time=end_time)

    def update(self, schedule_id: int, payload: dict) -> GroupSchedule:
        fields: dict = {}
        if payload.get("groupId") is not None:
            fields["group_id"] = self._group_id(payload["groupId"])
        if payload.get("dayOfWeek") is not None:
            fields["day_of_week"] = _day_of_week(payload["dayOfWeek"])
        if payload.get("startTime") is not None:
            fields["start_time"] = parse_hhmm(payload["startTime"], "startTime")
        if "endTime" in payload:
            end = payload["endTime"]
            fields["end_time"] = parse_hhmm(end, "endTime") if end not in (None, "") else None
        if not fields:
            raise ValidationError("Нет данных для обновления")

        current = self.get(schedule_id)
        self._ensure_free(
            fields.get("group_id", current.group_id),
            fields.get("day_of_week", current.day_of_week),
            schedule_id=current.schedule_id,
        )

        updated = self._schedules.update(schedule_id, fields)
        if not updated:
            raise NotFoundError("Расписание не найдено")
        return updated

    def delete(self, schedule_id: int) -> None:
        if not self._schedules.delete(schedule_id):
            raise NotFoundError("Расписание не найдено")

    def late_minutes(self, group_id: int, day: date, marked_at: datetime) -> Optional[int]:
        """Minutes between the group's start time on ``day`` and ``marked_at``.

        0 when on time; None on weekends or when the group has no schedule for
        that weekday.
        """
        day_of_week = day.isoweekday()
        if day_of_week > 5:
            return None

        schedule = self._schedules.get_for_group_and_day(group_id, day_of_week)
        if not schedule or not schedule.start_time:
            return None

        starts_at = datetime.combine(day, schedule.start_time)
        diff = (marked_at.replace(tzinfo=None) - starts_at).total_seconds() / 60
        return round_half_up(diff) if diff > 0 else 0


class BellScheduleService:
    def __init__(self, slots: LessonSlotRepository):
        self._slots = slots

    def list(self, *, day_of_week: Optional[int] = None) -> Sequence[LessonSlot]:
        return self._slots.list(day_of_week=day_of_week)

    def for_day(self, day: date) -> Sequence[LessonSlot]:
        return self._slots.list(day_of_week=day.isoweekday())

    def save(self, items) -> int:
        if not isinstance(items, list) or not items:
            raise ValidationError("items должен быть непустым массивом")

        slots: list[LessonSlot] = []
        for item in items:
            if not isinstance(item, dict):
                raise ValidationError("Некорректные поля в items")
            day, pair = item.get("dayOfWeek"), item.get("pairNumber")
            if not isinstance(day, int) or not isinstance(pair, int) or isinstance(day, bool) or isinstance(pair, bool):
                raise ValidationError("Некорректные поля в items")
            slots.append(
                LessonSlot(
                    day_of_week=day,
                    pair_number=pair,
                    start_time=parse_hhmm(item.get("startTime"), "startTime"),
                    end_time=parse_hhmm(item.get("endTime"), "endTime"),
                )
            )
        return self._slots.upsert_many(slots)

    def seed_defaults(self) -> int:
        count = self._slots.upsert_many(default_lesson_slots())
        logger.info("bell schedule seeded: %s slots", count)
        return count

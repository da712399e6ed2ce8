from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import GroupSchedule, LessonSlot


class GroupScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[GroupSchedule]:
        raise NotImplementedError

    def get_for_group_and_day(self, group_id: int, day_of_week: int) -> Optional[GroupSchedule]:
        raise NotImplementedError

    def list(self, *, group_id: Optional[int] = None) -> Sequence[GroupSchedule]:
        raise NotImplementedError

    def create(self, *, group_id: int, day_of_week: int, start_time, end_time) -> GroupSchedule:
        raise NotImplementedError

    def update(self, schedule_id: int, fields: dict) -> Optional[GroupSchedule]:
        """Partial update (keys: group_id, day_of_week, start_time, end_time)."""

        raise NotImplementedError

    def delete(self, schedule_id: int) -> bool:
        raise NotImplementedError


class LessonSlotRepository(Protocol):
    def list(self, *, day_of_week: Optional[int] = None) -> Sequence[LessonSlot]:
        raise NotImplementedError

    def upsert_many(self, slots: Iterable[LessonSlot]) -> int:
        """Create or overwrite slots keyed by (day_of_week, pair_number)."""

        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional


def _hhmm(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value is not None else None


@dataclass(frozen=True)
class GroupSchedule:
    """Начало занятий группы в конкретный день недели (1 = Пн ... 5 = Пт)."""

    schedule_id: int
    group_id: int
    day_of_week: int
    start_time: time
    end_time: Optional[time] = None
    group_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.schedule_id,
            "groupId": self.group_id,
            "dayOfWeek": self.day_of_week,
            "startTime": _hhmm(self.start_time),
            "endTime": _hhmm(self.end_time),
            "group": {"id": self.group_id, "name": self.group_name} if self.group_name else None,
        }


@dataclass(frozen=True)
class LessonSlot:
    """Звонок: пара ``pair_number`` в день ``day_of_week`` (0 = классный час)."""

    day_of_week: int
    pair_number: int
    start_time: time
    end_time: time

    def to_dict(self) -> dict:
        return {
            "dayOfWeek": self.day_of_week,
            "pairNumber": self.pair_number,
            "startTime": _hhmm(self.start_time),
            "endTime": _hhmm(self.end_time),
        }

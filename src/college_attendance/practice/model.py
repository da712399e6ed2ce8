from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

DEFAULT_PRACTICE_NAME = "практика"


@dataclass(frozen=True)
class PracticeDay:
    """День практики группы: отметки в этот день не ставятся, в отчёте ячейка "ПР"."""

    practice_id: int
    group_id: int
    date: date
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.practice_id, "groupId": self.group_id, "date": self.date.isoformat(), "name": self.name}

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, Optional, Tuple

from ..common.datetime_utils import iter_days
from ..common.validators import require_int
from ..core.exceptions import ValidationError
from ..groups.repository import GroupRepository
from .model import DEFAULT_PRACTICE_NAME
from .repository import PracticeDayRepository

logger = logging.getLogger(__name__)


class PracticeService:
    def __init__(self, practice_days: PracticeDayRepository, groups: GroupRepository):
        self._practice_days = practice_days
        self._groups = groups

    def add_range(self, group_id, start: date, end: date, name: Optional[str] = None) -> int:
        """Mark every calendar day of ``[start, end]`` as practice; returns the day count."""
        group_id = require_int(group_id, "groupId")
        if not self._groups.get_by_id(group_id):
            raise ValidationError("Группа не найдена")
        if start > end:
            raise ValidationError("Начальная дата не может быть позже конечной")

        count = 0
        for day in iter_days(start, end):
            self._practice_days.upsert(group_id=group_id, day=day, name=name or None)
            count += 1

        logger.info("practice days added: group=%s %s..%s (%s days)", group_id, start, end, count)
        return count

    def check(self, group_id: int, day: date) -> Tuple[bool, str]:
        practice = self._practice_days.get(group_id, day)
        return practice is not None, (practice.name if practice and practice.name else DEFAULT_PRACTICE_NAME)

    def groups_on(self, day: date) -> list[int]:
        return [p.group_id for p in self._practice_days.list_between(day, day)]

    def groups_in_range(self, start: date, end: date) -> list[int]:
        seen: list[int] = []
        for p in self._practice_days.list_between(start, end):
            if p.group_id not in seen:
                seen.append(p.group_id)
        return seen

    def names_for(self, group_ids: Iterable[int], start: date, end: date) -> Dict[Tuple[int, date], str]:
        """(group_id, day) -> practice name, for the export grid."""
        return {
            (p.group_id, p.date): p.name or DEFAULT_PRACTICE_NAME
            for p in self._practice_days.list_between(start, end, group_ids=list(group_ids))
        }

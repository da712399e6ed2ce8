from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import PracticeDay


class PracticeDayRepository(Protocol):
    def get(self, group_id: int, day: date) -> Optional[PracticeDay]:
        raise NotImplementedError

    def upsert(self, *, group_id: int, day: date, name: Optional[str]) -> PracticeDay:
        raise NotImplementedError

    def list_between(
        self,
        start: date,
        end: date,
        *,
        group_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[PracticeDay]:
        raise NotImplementedError

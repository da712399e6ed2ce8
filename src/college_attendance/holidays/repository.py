from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError

    def get_by_date(self, day: date) -> Optional[Holiday]:
        raise NotImplementedError

    def list(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(self, *, day: date, name: str) -> Holiday:
        raise NotImplementedError

    def update(self, holiday_id: int, fields: dict) -> Optional[Holiday]:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError

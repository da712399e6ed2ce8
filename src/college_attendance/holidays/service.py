from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_request_date
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Holiday
from .repository import HolidayRepository


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Holiday]:
        return self._holidays.list(start=start, end=end)

    def dates_between(self, start: date, end: date) -> list[date]:
        return [h.date for h in self._holidays.list(start=start, end=end)]

    def is_holiday(self, day: date) -> bool:
        return self._holidays.get_by_date(day) is not None

    def get(self, holiday_id: int) -> Holiday:
        holiday = self._holidays.get_by_id(holiday_id)
        if not holiday:
            raise NotFoundError("Праздник не найден")
        return holiday

    def _ensure_free(self, day: date, *, holiday_id: Optional[int] = None) -> None:
        other = self._holidays.get_by_date(day)
        if other and other.holiday_id != holiday_id:
            raise ValidationError("Праздник на эту дату уже существует")

    def create(self, payload: dict) -> Holiday:
        if not payload.get("date") or not payload.get("name"):
            raise ValidationError("date и name обязательны")

        day = parse_request_date(payload["date"], "date")
        self._ensure_free(day)
        return self._holidays.create(day=day, name=require_non_empty(payload["name"], "name"))

    def update(self, holiday_id: int, payload: dict, *, partial: bool) -> Holiday:
        if partial:
            if payload.get("date") is None and payload.get("name") is None:
                raise ValidationError("Нет данных для обновления")
        elif not payload.get("date") or not payload.get("name"):
            raise ValidationError("date и name обязательны")

        self.get(holiday_id)
        fields: dict = {}
        if payload.get("date") is not None:
            day = parse_request_date(payload["date"], "date")
            self._ensure_free(day, holiday_id=int(holiday_id))
            fields["date"] = day
        if payload.get("name") is not None:
            fields["name"] = require_non_empty(payload["name"], "name")

        updated = self._holidays.update(holiday_id, fields)
        if not updated:
            raise NotFoundError("Праздник не найден")
        return updated

    def delete(self, holiday_id: int) -> None:
        if not self._holidays.delete(holiday_id):
            raise NotFoundError("Праздник не найден")

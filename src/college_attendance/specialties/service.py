from __future__ import annotations

from typing import Sequence

from ..common.validators import require_int, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Specialty
from .repository import SpecialtyRepository


class SpecialtyService:
    def __init__(self, specialties: SpecialtyRepository):
        self._specialties = specialties

    def list(self) -> Sequence[Specialty]:
        return self._specialties.list_all()

    def get(self, specialty_id: int) -> Specialty:
        specialty = self._specialties.get_by_id(specialty_id)
        if not specialty:
            raise NotFoundError("Специальность не найдена")
        return specialty

    def _duration(self, value) -> int:
        years = require_int(value, "durationYears")
        if years < 1:
            raise ValidationError("durationYears должен быть положительным")
        return years

    def create(self, *, code: str, name: str, duration_years=4) -> Specialty:
        code = require_non_empty(code, "code")
        name = require_non_empty(name, "name")
        if self._specialties.get_by_code(code):
            raise ValidationError("Специальность с таким кодом уже существует")
        return self._specialties.create(code=code, name=name, duration_years=self._duration(duration_years))

    def update(self, specialty_id: int, payload: dict) -> Specialty:
        self.get(specialty_id)

        fields: dict = {}
        if payload.get("code") is not None:
            code = require_non_empty(payload["code"], "code")
            other = self._specialties.get_by_code(code)
            if other and other.specialty_id != int(specialty_id):
                raise ValidationError("Специальность с таким кодом уже существует")
            fields["code"] = code
        if payload.get("name") is not None:
            fields["name"] = require_non_empty(payload["name"], "name")
        if payload.get("durationYears") is not None:
            fields["duration_years"] = self._duration(payload["durationYears"])

        updated = self._specialties.update(specialty_id, fields)
        if not updated:
            raise NotFoundError("Специальность не найдена")
        return updated

    def delete(self, specialty_id: int) -> None:
        if not self._specialties.delete(specialty_id):
            raise NotFoundError("Специальность не найдена")

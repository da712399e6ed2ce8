from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Specialty


class SpecialtyRepository(Protocol):
    def get_by_id(self, specialty_id: int) -> Optional[Specialty]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Specialty]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Specialty]:
        raise NotImplementedError

    def create(self, *, code: str, name: str, duration_years: int) -> Specialty:
        raise NotImplementedError

    def update(self, specialty_id: int, fields: dict) -> Optional[Specialty]:
        raise NotImplementedError

    def delete(self, specialty_id: int) -> bool:
        raise NotImplementedError

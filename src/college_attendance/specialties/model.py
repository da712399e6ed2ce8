from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Specialty:
    """Специальность (код + название), к которой относятся группы."""

    specialty_id: int
    code: str
    name: str
    duration_years: int = 4

    def to_dict(self) -> dict:
        return {
            "id": self.specialty_id,
            "code": self.code,
            "name": self.name,
            "durationYears": self.duration_years,
        }

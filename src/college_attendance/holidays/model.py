from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Holiday:
    """Праздничный (нерабочий) день; excluded from academic days."""

    holiday_id: int
    date: date
    name: str

    def to_dict(self) -> dict:
        return {"id": self.holiday_id, "date": self.date.isoformat(), "name": self.name}

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import current_course


@dataclass(frozen=True)
class Group:
    """Учебная группа.

    ``course`` is the stored course; ``current_course`` derives it from the
    admission year, which is what the UI shows.
    """

    group_id: int
    name: str
    admission_year: int
    course: int
    specialty_id: int
    curator_id: Optional[int] = None
    specialty_code: Optional[str] = None
    specialty_name: Optional[str] = None
    curator_name: Optional[str] = None

    def current_course(self, today: date) -> int:
        return current_course(self.admission_year, today)

    def to_dict(self, today: Optional[date] = None) -> dict:
        data = {
            "id": self.group_id,
            "name": self.name,
            "admissionYear": self.admission_year,
            "course": self.course,
            "specialtyId": self.specialty_id,
            "specialty": {"code": self.specialty_code, "name": self.specialty_name} if self.specialty_code else None,
            "curatorId": self.curator_id,
            "curator": {"id": self.curator_id, "fullName": self.curator_name} if self.curator_id else None,
        }
        if today is not None:
            data["currentCourse"] = self.current_course(today)
        return data

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Студент группы; ``user_id`` is set when the student can log in (QR check-in)."""

    student_id: int
    full_name: str
    group_id: int
    user_id: Optional[int] = None
    group_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "fullName": self.full_name,
            "groupId": self.group_id,
            "userId": self.user_id,
            "group": {"id": self.group_id, "name": self.group_name} if self.group_name else None,
        }

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class QRToken:
    """Короткоживущий токен, который преподаватель показывает группе на паре."""

    token: str
    teacher_id: int
    lesson_id: int
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "teacherId": self.teacher_id,
            "lessonId": self.lesson_id,
            "expiresAt": self.expires_at.isoformat(),
        }


@dataclass(frozen=True)
class QRCheck:
    valid: bool
    message: str
    token: Optional[QRToken] = None

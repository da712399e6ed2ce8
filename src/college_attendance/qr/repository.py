from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import QRToken


class QRTokenRepository(Protocol):
    def get(self, token: str) -> Optional[QRToken]:
        raise NotImplementedError

    def create(self, *, token: str, teacher_id: int, lesson_id: int, expires_at: datetime) -> QRToken:
        raise NotImplementedError

    def delete_for_lesson(self, teacher_id: int, lesson_id: int) -> int:
        raise NotImplementedError

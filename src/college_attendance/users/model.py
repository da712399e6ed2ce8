from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Доменная сущность: пользователь системы.

    Примечание: чистый объект данных, без доступа к БД.
    """

    user_id: int
    login: str
    full_name: Optional[str]
    password_hash: str
    role: Role
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "login": self.login,
            "fullName": self.full_name,
            "role": self.role.value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

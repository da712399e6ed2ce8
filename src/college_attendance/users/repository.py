from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_login(self, login: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self, *, roles: Optional[Iterable[Role]] = None) -> Sequence[User]:
        raise NotImplementedError

    def create(self, *, login: str, full_name: Optional[str], password_hash: str, role: Role) -> User:
        raise NotImplementedError

    def update(self, user_id: int, fields: dict) -> Optional[User]:
        """Apply a partial update (keys: login, full_name, password_hash, role)."""

        raise NotImplementedError

    def delete(self, user_id: int) -> bool:
        raise NotImplementedError

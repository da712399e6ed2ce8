from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import DEFAULT_TOKEN_TTL_HOURS, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

_JWT_ALGORITHM = "HS256"
# werkzeug hashes look like "<method>:<params>$<salt>$<hash>"
_HASH_PREFIXES = ("scrypt:", "pbkdf2:")

CURATOR_ROLES = (Role.TEACHER, Role.HEAD)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class IssuedToken:
    token: str
    user: User


class AuthService:
    """Use case: login and bearer-token verification."""

    def __init__(
        self,
        users: UserRepository,
        *,
        secret_key: str,
        ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._users = users
        self._secret_key = secret_key
        self._ttl = timedelta(hours=int(ttl_hours))
        self._clock = clock

    def _password_matches(self, user: User, password: str) -> bool:
        stored = user.password_hash or ""
        if not stored.startswith(_HASH_PREFIXES):
            # Accounts created by hand in the database keep a plain-text password.
            logger.warning("plain-text password login for %r", user.login)
            return password == stored
        try:
            return check_password_hash(stored, password)
        except ValueError:
            return False

    def authenticate(self, login: str, password: str) -> IssuedToken:
        if not login or not password:
            raise ValidationError("Логин и пароль обязательны")

        user = self._users.get_by_login(login.strip())
        if not user or not self._password_matches(user, password):
            logger.info("failed login for %r", login)
            raise AuthenticationError("Неверный логин или пароль")

        payload = {"id": user.user_id, "role": user.role.value, "exp": self._clock() + self._ttl}
        token = jwt.encode(payload, self._secret_key, algorithm=_JWT_ALGORITHM)
        logger.info("login ok: %s (%s)", user.login, user.role.value)
        return IssuedToken(token=token, user=user)

    def verify_token(self, token: Optional[str]) -> User:
        if not token:
            raise AuthenticationError("Токен отсутствует")
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_JWT_ALGORITHM])
        except jwt.InvalidTokenError:
            raise AuthenticationError("Недействительный или просроченный токен")

        user = self._users.get_by_id(int(payload.get("id", 0)))
        if not user:
            raise AuthenticationError("Пользователь не найден")
        return user


class UserService:
    """Use case: manage accounts (head/admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self, *, role: Optional[str] = None) -> Sequence[User]:
        if role:
            try:
                return self._users.list_all(roles=[Role(role.upper())])
            except ValueError:
                raise ValidationError("Неизвестная роль")
        return self._users.list_all()

    def list_curators(self) -> Sequence[User]:
        return self._users.list_all(roles=CURATOR_ROLES)

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("Пользователь не найден")
        return user

    def _parse_role(self, value) -> Role:
        try:
            return Role(str(value).upper())
        except ValueError:
            raise ValidationError("Неизвестная роль")

    def create(self, *, login: str, password: str, role: str, full_name: Optional[str] = None) -> User:
        login = require_non_empty(login, "login")
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)
        parsed_role = self._parse_role(require_non_empty(role, "role"))

        if self._users.get_by_login(login):
            raise ValidationError("Пользователь с таким логином уже существует")

        return self._users.create(
            login=login,
            full_name=full_name or None,
            password_hash=generate_password_hash(password),
            role=parsed_role,
        )

    def update(self, user_id: int, payload: dict, *, partial: bool) -> User:
        self.get(user_id)

        if not partial:
            for required in ("login", "role"):
                require_non_empty(payload.get(required), required)

        fields: dict = {}
        if payload.get("login") is not None:
            login = require_non_empty(payload["login"], "login")
            other = self._users.get_by_login(login)
            if other and other.user_id != int(user_id):
                raise ValidationError("Пользователь с таким логином уже существует")
            fields["login"] = login
        if payload.get("role") is not None:
            fields["role"] = self._parse_role(payload["role"])
        if "fullName" in payload or not partial:
            fields["full_name"] = payload.get("fullName") or None
        if payload.get("password"):
            require_min_length(payload["password"], "password", MIN_PASSWORD_LENGTH)
            fields["password_hash"] = generate_password_hash(payload["password"])

        updated = self._users.update(user_id, fields)
        if not updated:
            raise NotFoundError("Пользователь не найден")
        return updated

    def delete(self, user_id: int) -> None:
        if not self._users.delete(user_id):
            raise NotFoundError("Пользователь не найден")

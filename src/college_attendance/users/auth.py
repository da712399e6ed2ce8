from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, request

from ..common.http import current_container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import User

HEAD_OR_ADMIN = (Role.HEAD, Role.ADMIN)
TEACHER_OR_ABOVE = (Role.TEACHER, Role.HEAD, Role.ADMIN)
ADMIN_ONLY = (Role.ADMIN,)


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    return header.split(" ", 1)[1].strip() or None


def current_user() -> User:
    return g.current_user


def token_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.current_user = current_container().auth_service.verify_token(bearer_token())
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    """token_required plus a role check; 403 for any other role."""

    allowed = frozenset(roles)
    names = ", ".join(r.value for r in roles)

    def decorator(view):
        @wraps(view)
        @token_required
        def wrapper(*args, **kwargs):
            if current_user().role not in allowed:
                raise AuthorizationError(f"Доступ запрещён. Только для {names}")
            return view(*args, **kwargs)

        return wrapper

    return decorator

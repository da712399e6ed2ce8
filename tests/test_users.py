from __future__ import annotations

from datetime import datetime, timezone

import jwt
import pytest

from college_attendance.core.enums import Role
from college_attendance.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from college_attendance.users.service import AuthService


def test_login_returns_token_for_valid_credentials(services, college):
    issued = services.auth_service.authenticate("teacher", "teacher123")
    assert issued.user.user_id == college.teacher.user_id

    payload = jwt.decode(issued.token, "test-secret", algorithms=["HS256"])
    assert payload["id"] == college.teacher.user_id
    assert payload["role"] == "TEACHER"
    assert services.auth_service.verify_token(issued.token).login == "teacher"


def test_login_rejects_wrong_password(services, college):
    with pytest.raises(AuthenticationError):
        services.auth_service.authenticate("teacher", "nope")
    with pytest.raises(AuthenticationError):
        services.auth_service.authenticate("ghost", "teacher123")
    with pytest.raises(ValidationError):
        services.auth_service.authenticate("", "")


def test_plain_text_password_still_logs_in(repos, services):
    repos.users.create(login="legacy", full_name=None, password_hash="secret1", role=Role.TEACHER)
    assert services.auth_service.authenticate("legacy", "secret1").user.login == "legacy"
    with pytest.raises(AuthenticationError):
        services.auth_service.authenticate("legacy", "secret2")


def test_expired_or_foreign_token_is_rejected(repos, college):
    past = AuthService(repos.users, secret_key="test-secret", ttl_hours=1, clock=lambda: datetime(2020, 1, 1, tzinfo=timezone.utc))
    token = past.authenticate("admin", "admin123").token
    with pytest.raises(AuthenticationError):
        past.verify_token(token)

    other = AuthService(repos.users, secret_key="other-secret")
    with pytest.raises(AuthenticationError):
        other.verify_token(AuthService(repos.users, secret_key="test-secret").authenticate("admin", "admin123").token)

    with pytest.raises(AuthenticationError):
        other.verify_token(None)


def test_create_user_hashes_password(services, repos):
    user = services.user_service.create(login="new", password="secret1", role="teacher", full_name="Новый")
    assert user.role == Role.TEACHER
    assert repos.users.get_by_id(user.user_id).password_hash != "secret1"
    assert services.auth_service.authenticate("new", "secret1").user.user_id == user.user_id


def test_create_user_validation(services, college):
    with pytest.raises(ValidationError):
        services.user_service.create(login="admin", password="secret1", role="ADMIN")
    with pytest.raises(ValidationError):
        services.user_service.create(login="x", password="123", role="ADMIN")
    with pytest.raises(ValidationError):
        services.user_service.create(login="x", password="secret1", role="JANITOR")


def test_update_user_partial_and_full(services, college):
    updated = services.user_service.update(college.teacher.user_id, {"fullName": "Иванова А. С."}, partial=True)
    assert updated.full_name == "Иванова А. С."
    assert updated.login == "teacher"

    with pytest.raises(ValidationError):
        services.user_service.update(college.teacher.user_id, {"fullName": "x"}, partial=False)
    with pytest.raises(ValidationError):
        services.user_service.update(college.teacher.user_id, {"login": "admin"}, partial=True)


def test_list_by_role_and_curators(services, college):
    assert [u.login for u in services.user_service.list_users(role="student")] == ["student"]
    assert {u.login for u in services.user_service.list_curators()} == {"teacher", "head"}
    with pytest.raises(ValidationError):
        services.user_service.list_users(role="nobody")


def test_delete_missing_user(services):
    with pytest.raises(NotFoundError):
        services.user_service.delete(999)

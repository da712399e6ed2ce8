from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import require_int, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from ..users.repository import UserRepository
from .model import Student
from .repository import StudentRepository


class StudentService:
    def __init__(self, students: StudentRepository, groups: GroupRepository, users: UserRepository):
        self._students = students
        self._groups = groups
        self._users = users

    def list(self, *, group_id: Optional[int] = None) -> Sequence[Student]:
        return self._students.list(group_id=group_id)

    def get(self, student_id: int) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Студент не найден")
        return student

    def _group_id(self, value) -> int:
        group_id = require_int(value, "groupId")
        if not self._groups.get_by_id(group_id):
            raise ValidationError("Группа не найдена")
        return group_id

    def _user_id(self, value) -> Optional[int]:
        if value in (None, ""):
            return None
        user_id = require_int(value, "userId")
        if not self._users.get_by_id(user_id):
            raise ValidationError("Пользователь не найден")
        return user_id

    def create(self, payload: dict) -> Student:
        return self._students.create(
            full_name=require_non_empty(payload.get("fullName"), "fullName"),
            group_id=self._group_id(payload.get("groupId")),
            user_id=self._user_id(payload.get("userId")),
        )

    def update(self, student_id: int, payload: dict) -> Student:
        fields: dict = {}
        if payload.get("fullName") is not None:
            fields["full_name"] = require_non_empty(payload["fullName"], "fullName")
        if payload.get("groupId") is not None:
            fields["group_id"] = self._group_id(payload["groupId"])
        if "userId" in payload:
            fields["user_id"] = self._user_id(payload["userId"])
        if not fields:
            raise ValidationError("Нет данных для обновления")

        self.get(student_id)
        updated = self._students.update(student_id, fields)
        if not updated:
            raise NotFoundError("Студент не найден")
        return updated

    def delete(self, student_id: int) -> None:
        if not self._students.delete(student_id):
            raise NotFoundError("Студент не найден")

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import require_fields, require_int, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..specialties.repository import SpecialtyRepository
from ..users.repository import UserRepository
from ..users.service import CURATOR_ROLES
from .model import Group
from .repository import GroupRepository

logger = logging.getLogger(__name__)

_EMPTY_CURATOR = (None, "", "null")


class GroupService:
    def __init__(self, groups: GroupRepository, specialties: SpecialtyRepository, users: UserRepository):
        self._groups = groups
        self._specialties = specialties
        self._users = users

    def list(self) -> Sequence[Group]:
        return self._groups.list_all()

    def get(self, group_id: int) -> Group:
        group = self._groups.get_by_id(group_id)
        if not group:
            raise NotFoundError("Группа не найдена")
        return group

    def _specialty_id(self, code: str) -> int:
        specialty = self._specialties.get_by_code(str(code).strip())
        if not specialty:
            raise ValidationError("Специальность не найдена")
        return specialty.specialty_id

    def _curator_id(self, value: Any, *, group_id: Optional[int] = None) -> Optional[int]:
        if value in _EMPTY_CURATOR:
            return None

        curator_id = require_int(value, "curatorId")
        curator = self._users.get_by_id(curator_id)
        if not curator or curator.role not in CURATOR_ROLES:
            raise ValidationError("Куратор не найден")

        busy = self._groups.get_by_curator(curator_id)
        if busy and busy.group_id != group_id:
            raise ValidationError("Этот преподаватель уже куратор другой группы")
        return curator_id

    def create(self, payload: dict) -> Group:
        try:
            require_fields(payload, ("name", "specialtyCode", "course", "admissionYear"))
        except ValidationError:
            raise ValidationError("Заполните: название, специальность, курс, год поступления")

        name = require_non_empty(payload["name"], "name")
        if self._groups.get_by_name(name):
            raise ValidationError("Группа с таким названием уже существует")

        group = self._groups.create(
            name=name,
            admission_year=require_int(payload["admissionYear"], "admissionYear"),
            course=require_int(payload["course"], "course"),
            specialty_id=self._specialty_id(payload["specialtyCode"]),
            curator_id=self._curator_id(payload.get("curatorId")),
        )
        logger.info("group created: %s (id=%s)", group.name, group.group_id)
        return group

    def update(self, group_id: int, payload: dict) -> Group:
        """Apply only the keys present in ``payload``."""
        self.get(group_id)

        fields: dict = {}
        if payload.get("name") is not None:
            name = require_non_empty(payload["name"], "name")
            other = self._groups.get_by_name(name)
            if other and other.group_id != int(group_id):
                raise ValidationError("Группа с таким названием уже существует")
            fields["name"] = name
        if payload.get("course") is not None:
            fields["course"] = require_int(payload["course"], "course")
        if payload.get("admissionYear") is not None:
            fields["admission_year"] = require_int(payload["admissionYear"], "admissionYear")
        if payload.get("specialtyCode") is not None:
            fields["specialty_id"] = self._specialty_id(payload["specialtyCode"])
        if "curatorId" in payload:
            fields["curator_id"] = self._curator_id(payload["curatorId"], group_id=int(group_id))

        updated = self._groups.update(group_id, fields)
        if not updated:
            raise NotFoundError("Группа не найдена")
        return updated

    def delete(self, group_id: int) -> None:
        if not self._groups.delete(group_id):
            raise NotFoundError("Группа не найдена")
        logger.info("group deleted: id=%s", group_id)

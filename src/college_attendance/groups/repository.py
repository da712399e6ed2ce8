from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Group


class GroupRepository(Protocol):
    def get_by_id(self, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Group]:
        raise NotImplementedError

    def get_by_curator(self, curator_id: int) -> Optional[Group]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Group]:
        raise NotImplementedError

    def list_by_ids(self, group_ids: Iterable[int]) -> Sequence[Group]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        admission_year: int,
        course: int,
        specialty_id: int,
        curator_id: Optional[int],
    ) -> Group:
        raise NotImplementedError

    def update(self, group_id: int, fields: dict) -> Optional[Group]:
        """Partial update (keys: name, admission_year, course, specialty_id, curator_id)."""

        raise NotImplementedError

    def delete(self, group_id: int) -> bool:
        raise NotImplementedError

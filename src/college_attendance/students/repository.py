from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence, Tuple

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        raise NotImplementedError

    def find_by_full_name(self, full_name: str) -> Optional[Student]:
        raise NotImplementedError

    def list(self, *, group_id: Optional[int] = None) -> Sequence[Student]:
        raise NotImplementedError

    def list_by_group_ids(self, group_ids: Iterable[int]) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, *, full_name: str, group_id: int, user_id: Optional[int] = None) -> Student:
        raise NotImplementedError

    def create_many(self, rows: Iterable[Tuple[str, int]]) -> int:
        """Insert (full_name, group_id) pairs; returns the number of inserted rows."""

        raise NotImplementedError

    def update(self, student_id: int, fields: dict) -> Optional[Student]:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        raise NotImplementedError

"""Bulk student import from an Excel sheet.

Expected layout (first sheet, first row is a header):
last name | first name | middle name | group
"""
from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from ..core.constants import MAX_IMPORT_ERRORS
from ..core.exceptions import ValidationError
from ..groups.repository import GroupRepository
from .repository import StudentRepository

logger = logging.getLogger(__name__)

_DASHES = re.compile(r"[-–—]")
_NOT_ALLOWED = re.compile(r"[^a-zа-я0-9\s-]")
_SPACES = re.compile(r"\s+")

Row = Tuple[int, Sequence[str]]


def normalize_group_name(name) -> str:
    """Loose form of a group name so "ИС-21", "ис 21" and "Ис–21" match."""
    if name is None:
        return ""
    value = str(name).lower().replace("ё", "е").replace("ы", "и")
    value = _DASHES.sub("-", value)
    value = _NOT_ALLOWED.sub("", value)
    return _SPACES.sub("", value).strip()


@dataclass
class ImportResult:
    total_in_file: int = 0
    imported_count: int = 0
    skipped_count: int = 0
    errors: List[str] = field(default_factory=list)
    not_found_groups: List[str] = field(default_factory=list)

    @property
    def errors_count(self) -> int:
        return len(self.errors)

    @property
    def message(self) -> str:
        return f"Добавлено: {self.imported_count} | Пропущено: {self.skipped_count} | Ошибок: {self.errors_count}"

    def to_dict(self) -> dict:
        data = {
            "totalInFile": self.total_in_file,
            "importedCount": self.imported_count,
            "skippedCount": self.skipped_count,
            "errorsCount": self.errors_count,
            "notFoundGroups": list(self.not_found_groups),
            "message": self.message,
        }
        if self.errors:
            data["errors"] = self.errors[:MAX_IMPORT_ERRORS]
        return data


def read_rows(data: bytes) -> List[Row]:
    """Data rows of the first sheet as (excel row number, cell strings)."""
    try:
        frame = pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, dtype=str, engine="openpyxl")
    except Exception as e:
        raise ValidationError(f"Файл не обработан: {e}")

    frame = frame.fillna("")
    rows: List[Row] = []
    for index, values in enumerate(frame.itertuples(index=False, name=None)):
        if index == 0:
            continue
        cells = [str(v).strip() for v in values]
        if not any(cells):
            continue
        rows.append((index + 1, cells))
    return rows


class StudentImporter:
    def __init__(self, students: StudentRepository, groups: GroupRepository):
        self._students = students
        self._groups = groups

    def _group_lookup(self) -> Dict[str, int]:
        lookup: Dict[str, int] = {}
        for g in self._groups.list_all():
            key = normalize_group_name(g.name)
            lookup[key] = g.group_id
            lookup[key.replace("-", "")] = g.group_id
            lookup[g.name.lower().strip()] = g.group_id
        return lookup

    @staticmethod
    def _find_group(lookup: Dict[str, int], raw: str) -> Optional[int]:
        normalized = normalize_group_name(raw)
        for key in (normalized, normalized.replace("-", ""), raw.lower().strip()):
            if key in lookup:
                return lookup[key]
        return None

    def import_rows(self, rows: Iterable[Row]) -> ImportResult:
        result = ImportResult()
        lookup = self._group_lookup()
        existing = {(s.full_name.lower().strip(), s.group_id) for s in self._students.list()}
        not_found: List[str] = []
        to_add: List[Tuple[str, int]] = []

        for row_number, cells in rows:
            result.total_in_file += 1
            if len(cells) < 4:
                result.errors.append(f"Строка {row_number}: мало колонок")
                continue

            last_name, first_name, middle_name, group_raw = (c.strip() for c in cells[:4])
            if not last_name or not first_name or not group_raw:
                result.errors.append(f"Строка {row_number}: нет ФИО или группы")
                continue

            full_name = _SPACES.sub(" ", f"{last_name} {first_name} {middle_name}".strip())
            group_id = self._find_group(lookup, group_raw)
            if group_id is None:
                if group_raw not in not_found:
                    not_found.append(group_raw)
                result.errors.append(f'Строка {row_number} ({full_name}): группа не найдена "{group_raw}"')
                continue

            key = (full_name.lower(), group_id)
            if key in existing:
                result.skipped_count += 1
                continue

            existing.add(key)
            to_add.append((full_name, group_id))

        result.imported_count = self._students.create_many(to_add) if to_add else 0
        result.not_found_groups = not_found
        logger.info("student import: %s", result.message)
        return result

    def import_file(self, data: bytes) -> ImportResult:
        return self.import_rows(read_rows(data))

"""What one cell of the attendance grid shows for a student on a given day.

Precedence is fixed: weekend or holiday, then practice day, then the recorded
status, then absent when nothing was recorded.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import AbstractSet, Any, Mapping, Optional

from ..core.enums import AttendanceStatus

DAY_OFF_LABEL = "В"
PRACTICE_LABEL = "ПР"
DEFAULT_LABEL = "О"

STATUS_LABELS: Mapping[AttendanceStatus, str] = {
    AttendanceStatus.PRESENT: "П",
    AttendanceStatus.ABSENT: "О",
    AttendanceStatus.SICK: "Б",
    AttendanceStatus.ITHUB: "IT",
    AttendanceStatus.VALID_ABSENT: "У",
    AttendanceStatus.DUAL: "Д",
    AttendanceStatus.LATE: "ОП",
    AttendanceStatus.REMOTE: "Дис",
}

# ARGB fills used in the exported workbook.
LABEL_COLORS: Mapping[str, str] = {
    "П": "FF90EE90",
    "О": "FFFFCC00",
    "Б": "FFFF6666",
    "У": "FF92D050",
    "IT": "FF4472C4",
    "Д": "FFADD8E6",
    "ОП": "FFFFA500",
    "Дис": "FF9BC2E6",
    DAY_OFF_LABEL: "FFD9D9D9",
    PRACTICE_LABEL: "FFB4A7D6",
}

_LABELS_BY_VALUE = {status.value: label for status, label in STATUS_LABELS.items()}


class CellKind:
    DAY_OFF = "day_off"
    PRACTICE = "practice"
    STATUS = "status"
    DEFAULT = "default"


@dataclass(frozen=True)
class CellLabel:
    label: str
    color: Optional[str]
    kind: str


def _label(label: str, kind: str) -> CellLabel:
    return CellLabel(label=label, color=LABEL_COLORS.get(label), kind=kind)


def classify_cell(
    day: date,
    *,
    holidays: AbstractSet[date],
    practice_name: Optional[str] = None,
    status: Any = None,
) -> CellLabel:
    if day.weekday() >= 5 or day in holidays:
        return _label(DAY_OFF_LABEL, CellKind.DAY_OFF)
    if practice_name:
        return _label(PRACTICE_LABEL, CellKind.PRACTICE)
    if status is not None:
        value = status.value if isinstance(status, AttendanceStatus) else str(status)
        return _label(_LABELS_BY_VALUE.get(value, value), CellKind.STATUS)
    return _label(DEFAULT_LABEL, CellKind.DEFAULT)

from __future__ import annotations

from datetime import date

import pytest

from college_attendance.core.enums import AttendanceStatus
from college_attendance.reports.classifier import (
    DAY_OFF_LABEL,
    DEFAULT_LABEL,
    LABEL_COLORS,
    PRACTICE_LABEL,
    CellKind,
    classify_cell,
)

WEDNESDAY = date(2026, 10, 14)
SATURDAY = date(2026, 10, 17)


def test_weekend_beats_practice_and_status():
    cell = classify_cell(SATURDAY, holidays=set(), practice_name="практика", status=AttendanceStatus.PRESENT)
    assert cell.label == DAY_OFF_LABEL
    assert cell.kind == CellKind.DAY_OFF


def test_holiday_beats_practice():
    cell = classify_cell(WEDNESDAY, holidays={WEDNESDAY}, practice_name="практика")
    assert cell.label == DAY_OFF_LABEL


def test_practice_beats_recorded_status():
    cell = classify_cell(WEDNESDAY, holidays=set(), practice_name="учебная", status=AttendanceStatus.ABSENT)
    assert cell.label == PRACTICE_LABEL
    assert cell.color == LABEL_COLORS[PRACTICE_LABEL]


@pytest.mark.parametrize(
    "status, label",
    [
        (AttendanceStatus.PRESENT, "П"),
        (AttendanceStatus.ABSENT, "О"),
        (AttendanceStatus.SICK, "Б"),
        (AttendanceStatus.ITHUB, "IT"),
        (AttendanceStatus.VALID_ABSENT, "У"),
        (AttendanceStatus.DUAL, "Д"),
        (AttendanceStatus.LATE, "ОП"),
        (AttendanceStatus.REMOTE, "Дис"),
    ],
)
def test_status_labels(status, label):
    cell = classify_cell(WEDNESDAY, holidays=set(), status=status)
    assert cell.label == label
    assert cell.kind == CellKind.STATUS
    assert cell.color == LABEL_COLORS[label]


def test_no_record_defaults_to_absent():
    cell = classify_cell(WEDNESDAY, holidays=set())
    assert cell.label == DEFAULT_LABEL
    assert cell.kind == CellKind.DEFAULT


def test_unknown_status_is_shown_as_is():
    cell = classify_cell(WEDNESDAY, holidays=set(), status="EXAM")
    assert cell.label == "EXAM"
    assert cell.color is None

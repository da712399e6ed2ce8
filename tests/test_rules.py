from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from college_attendance.attendance.rules import (
    ATTENDANCE_RULES,
    academic_days,
    calculate_attendance,
    round_half_up,
    rule_for,
)
from college_attendance.core.enums import AttendanceStatus

MONDAY = date(2026, 10, 12)
FRIDAY = date(2026, 10, 16)
SATURDAY = date(2026, 10, 17)
SUNDAY = date(2026, 10, 18)


@dataclass(frozen=True)
class Rec:
    date: object
    status: object


def _week(*statuses):
    return [Rec(MONDAY + timedelta(days=i), s) for i, s in enumerate(statuses)]


def test_weekend_single_day_has_no_academic_days():
    assert academic_days(SATURDAY, SATURDAY) == []
    assert academic_days(SUNDAY, SUNDAY, []) == []


def test_academic_days_skip_weekends_and_holidays():
    days = academic_days(MONDAY, SUNDAY, [date(2026, 10, 14)])
    assert days == [MONDAY, date(2026, 10, 13), date(2026, 10, 15), FRIDAY]


def test_inverted_range_yields_nothing():
    assert academic_days(FRIDAY, MONDAY) == []
    stats = calculate_attendance([], [], FRIDAY, MONDAY)
    assert stats.percent == 100
    assert stats.total_days == 0


def test_range_fully_covered_by_holidays_is_hundred_percent():
    holidays = [MONDAY + timedelta(days=i) for i in range(5)]
    assert academic_days(MONDAY, FRIDAY, holidays) == []

    stats = calculate_attendance(_week(*[AttendanceStatus.ABSENT] * 5), holidays, MONDAY, FRIDAY)
    assert stats.percent == 100
    assert stats.total_days == 0
    assert stats.present_days == 0


def test_unmarked_day_counts_as_absent():
    stats = calculate_attendance([], [], MONDAY, MONDAY)
    assert (stats.total_days, stats.present_days, stats.absent_days, stats.percent) == (1, 0, 1, 0)


def test_sick_day_does_not_count():
    stats = calculate_attendance([Rec(MONDAY, AttendanceStatus.SICK)], [], MONDAY, MONDAY)
    assert stats.total_days == 0
    assert stats.percent == 100


def test_valid_absent_bonus_is_clamped():
    stats = calculate_attendance([Rec(MONDAY, AttendanceStatus.VALID_ABSENT)], [], MONDAY, MONDAY)
    assert stats.total_days == 1
    assert stats.present_days == 1
    assert stats.percent == 100


def test_four_of_five_present_is_eighty():
    records = _week(*[AttendanceStatus.PRESENT] * 4, AttendanceStatus.ABSENT)
    stats = calculate_attendance(records, [], MONDAY, FRIDAY)
    assert stats.percent == 80
    assert stats.absent_days == 1


def test_valid_absent_bonus_below_clamp():
    records = _week(
        AttendanceStatus.PRESENT,
        AttendanceStatus.PRESENT,
        AttendanceStatus.PRESENT,
        AttendanceStatus.VALID_ABSENT,
        AttendanceStatus.ABSENT,
    )
    # (4 + 0.2) / 5
    assert calculate_attendance(records, [], MONDAY, FRIDAY).percent == 84


def test_percent_rounds_half_up():
    start = MONDAY
    end = date(2026, 10, 21)  # 8 academic days
    stats = calculate_attendance([Rec(start, AttendanceStatus.PRESENT)], [], start, end)
    assert stats.total_days == 8
    assert stats.percent == 13
    assert round_half_up(2.5) == 3


def test_late_is_not_counted():
    records = _week(AttendanceStatus.LATE, AttendanceStatus.PRESENT)
    stats = calculate_attendance(records, [], MONDAY, date(2026, 10, 13))
    assert stats.total_days == 1
    assert stats.percent == 100


def test_remote_and_unknown_statuses_are_skipped():
    assert AttendanceStatus.REMOTE not in ATTENDANCE_RULES
    assert rule_for("REMOTE") is None
    assert rule_for("SOMETHING") is None

    records = [Rec(MONDAY, "REMOTE"), Rec(date(2026, 10, 13), "SOMETHING")]
    stats = calculate_attendance(records, [], MONDAY, date(2026, 10, 13))
    assert stats.total_days == 0
    assert stats.percent == 100


def test_raw_status_strings_are_accepted():
    stats = calculate_attendance([Rec(MONDAY, "PRESENT")], [], MONDAY, MONDAY)
    assert stats.percent == 100


def test_duplicate_dates_last_in_input_wins():
    first = [Rec(MONDAY, AttendanceStatus.PRESENT), Rec(MONDAY, AttendanceStatus.ABSENT)]
    second = list(reversed(first))
    assert calculate_attendance(first, [], MONDAY, MONDAY).percent == 0
    assert calculate_attendance(second, [], MONDAY, MONDAY).percent == 100


def test_datetime_inputs_are_truncated_to_days():
    records = [Rec(datetime(2026, 10, 12, 8, 30), AttendanceStatus.PRESENT)]
    stats = calculate_attendance(
        records, [datetime(2026, 10, 13, 0, 0)], datetime(2026, 10, 12, 12, 0), date(2026, 10, 13)
    )
    assert stats.total_days == 1
    assert stats.percent == 100


def test_same_input_same_output():
    records = _week(AttendanceStatus.PRESENT, AttendanceStatus.SICK, AttendanceStatus.ABSENT)
    assert calculate_attendance(records, [], MONDAY, FRIDAY) == calculate_attendance(records, [], MONDAY, FRIDAY)


def test_absent_to_present_never_lowers_percent():
    base = [AttendanceStatus.ABSENT, AttendanceStatus.SICK, AttendanceStatus.VALID_ABSENT, AttendanceStatus.ABSENT]
    before = calculate_attendance(_week(*base), [], MONDAY, FRIDAY).percent
    for i, status in enumerate(base):
        if status != AttendanceStatus.ABSENT:
            continue
        changed = list(base)
        changed[i] = AttendanceStatus.PRESENT
        assert calculate_attendance(_week(*changed), [], MONDAY, FRIDAY).percent >= before


def test_percent_never_exceeds_hundred():
    records = _week(*[AttendanceStatus.VALID_ABSENT] * 5)
    stats = calculate_attendance(records, [], MONDAY, FRIDAY)
    assert stats.percent == 100
    assert stats.to_dict() == {"percent": 100, "presentDays": 5, "totalDays": 5, "absentDays": 0}

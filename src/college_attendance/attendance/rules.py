"""Attendance rules: academic days and attendance percentage.

This is the single place where the meaning of every status is defined.
Everything here is pure: callers fetch records and holidays from storage and
pass plain values in; nothing is read from or written to the database.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping, Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusRule:
    is_present: bool
    counts_in_total: bool
    bonus: float = 0.0


# REMOTE has no rule on purpose: callers map it to ITHUB before calculating,
# a raw REMOTE day is excluded from both counts.
ATTENDANCE_RULES: Mapping[AttendanceStatus, StatusRule] = {
    AttendanceStatus.PRESENT: StatusRule(is_present=True, counts_in_total=True),
    AttendanceStatus.VALID_ABSENT: StatusRule(is_present=True, counts_in_total=True, bonus=0.2),
    AttendanceStatus.ITHUB: StatusRule(is_present=True, counts_in_total=True),
    AttendanceStatus.DUAL: StatusRule(is_present=True, counts_in_total=True),
    AttendanceStatus.LATE: StatusRule(is_present=False, counts_in_total=False),
    AttendanceStatus.ABSENT: StatusRule(is_present=False, counts_in_total=True),
    AttendanceStatus.SICK: StatusRule(is_present=False, counts_in_total=False),
}

_RULES_BY_VALUE: Mapping[str, StatusRule] = {status.value: rule for status, rule in ATTENDANCE_RULES.items()}

MAX_PERCENT = 100


@dataclass(frozen=True)
class AttendanceStats:
    percent: int
    present_days: int
    total_days: int
    absent_days: int

    def to_dict(self) -> dict:
        return {
            "percent": self.percent,
            "presentDays": self.present_days,
            "totalDays": self.total_days,
            "absentDays": self.absent_days,
        }


def _as_day(value: Any) -> date:
    # datetime is a subclass of date, so it has to be checked first.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return _as_day(value.date)


def _status_value(status: Any) -> str:
    if isinstance(status, AttendanceStatus):
        return status.value
    return str(status)


def rule_for(status: Any) -> Optional[StatusRule]:
    """Rule for a status or raw status string; None when it is not in the table."""
    return _RULES_BY_VALUE.get(_status_value(status))


def academic_days(start_date: Any, end_date: Any, holidays: Iterable[Any] = ()) -> list[date]:
    """Mon-Fri days of the inclusive range that are not holidays, ascending.

    An inverted range yields an empty list.
    """

    holiday_set = {_as_day(h) for h in holidays}

    days: list[date] = []
    current = _as_day(start_date)
    end = _as_day(end_date)
    while current <= end:
        if current.weekday() < 5 and current not in holiday_set:
            days.append(current)
        current += timedelta(days=1)
    return days


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_attendance(
    records: Iterable[Any],
    holidays: Iterable[Any],
    start_date: Any,
    end_date: Any,
) -> AttendanceStats:
    """Attendance percentage of one student over an inclusive date range.

    ``records`` are objects with ``date`` and ``status`` attributes. When two
    records share a day, the one later in the input wins; ``updated_at`` is not
    consulted. Academic days without a record count as ABSENT. Statuses with
    no rule are skipped. A range with no countable days is reported as 100%.
    """

    days = academic_days(start_date, end_date, holidays)

    status_by_day: dict[str, Any] = {}
    for record in records:
        status_by_day[_as_day(record.date).isoformat()] = record.status

    total_days = 0
    present_days = 0
    bonus_total = 0.0

    for day in days:
        key = day.isoformat()
        if key in status_by_day:
            status = status_by_day[key]
        else:
            status = AttendanceStatus.ABSENT

        rule = rule_for(status)
        if rule is None:
            continue

        if rule.counts_in_total:
            total_days += 1
            if rule.is_present:
                present_days += 1
                bonus_total += rule.bonus

    if total_days > 0:
        percent = round_half_up((present_days + bonus_total) / total_days * 100)
    else:
        percent = MAX_PERCENT

    return AttendanceStats(
        percent=min(percent, MAX_PERCENT),
        present_days=present_days,
        total_days=total_days,
        absent_days=total_days - present_days,
    )

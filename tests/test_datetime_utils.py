from __future__ import annotations

from datetime import date, datetime

import pytest

from college_attendance.common.datetime_utils import (
    current_course,
    parse_hhmm,
    parse_range_type,
    parse_request_date,
    parse_request_datetime,
    resolve_range,
)
from college_attendance.core.enums import RangeType
from college_attendance.core.exceptions import ValidationError

TODAY = date(2026, 10, 14)


def test_resolve_named_ranges():
    today = resolve_range(RangeType.TODAY, today=TODAY)
    assert (today.start, today.end) == (TODAY, TODAY)

    week = resolve_range(RangeType.WEEK, today=TODAY)
    assert (week.start, week.end) == (date(2026, 10, 8), TODAY)

    month = resolve_range(RangeType.MONTH, today=TODAY)
    assert (month.start, month.end) == (date(2026, 10, 1), date(2026, 10, 31))

    s1 = resolve_range(RangeType.SEMESTER1, today=TODAY)
    assert (s1.start, s1.end) == (date(2026, 9, 1), date(2027, 1, 31))

    s2 = resolve_range(RangeType.SEMESTER2, today=TODAY)
    assert (s2.start, s2.end) == (date(2027, 2, 1), date(2027, 7, 31))

    year = resolve_range(RangeType.ACADEMIC_YEAR, today=TODAY)
    assert (year.start, year.end) == (date(2026, 9, 1), date(2027, 7, 31))


def test_academic_year_in_spring_starts_previous_september():
    year = resolve_range(RangeType.ACADEMIC_YEAR, today=date(2027, 3, 10))
    assert year.start == date(2026, 9, 1)


def test_custom_range_needs_both_bounds():
    custom = resolve_range(RangeType.CUSTOM, today=TODAY, start="2026-10-01", end="2026-10-10")
    assert (custom.start, custom.end) == (date(2026, 10, 1), date(2026, 10, 10))
    assert custom.label(RangeType.CUSTOM) == "2026-10-01 → 2026-10-10"

    fallback = resolve_range(RangeType.CUSTOM, today=TODAY, start="2026-10-01")
    assert fallback.start == date(2026, 9, 1)


def test_custom_range_rejects_reversed_bounds():
    with pytest.raises(ValidationError, match="позже"):
        resolve_range(RangeType.CUSTOM, today=TODAY, start="2026-10-16", end="2026-10-12")

    single = resolve_range(RangeType.CUSTOM, today=TODAY, start="2026-10-12", end="2026-10-12")
    assert single.start == single.end == date(2026, 10, 12)


def test_unknown_range_type_falls_back_to_academic_year():
    assert parse_range_type("decade") == RangeType.ACADEMIC_YEAR
    assert parse_range_type(None) == RangeType.ACADEMIC_YEAR
    assert parse_range_type("week") == RangeType.WEEK


def test_current_course_from_admission_year():
    assert current_course(2024, TODAY) == 3
    assert current_course(2026, date(2027, 5, 1)) == 1


def test_parse_request_date():
    assert parse_request_date("2026-10-14T08:00:00Z", "date") == TODAY
    with pytest.raises(ValidationError):
        parse_request_date("14.10.2026", "date")
    with pytest.raises(ValidationError):
        parse_request_date(None, "date")


def test_parse_request_datetime_converts_to_local():
    # Asia/Almaty is UTC+5.
    assert parse_request_datetime("2026-10-14T04:10:00Z", "markedAt") == datetime(2026, 10, 14, 9, 10)
    assert parse_request_datetime("2026-10-14T09:10:00", "markedAt") == datetime(2026, 10, 14, 9, 10)
    with pytest.raises(ValidationError):
        parse_request_datetime("yesterday", "markedAt")


def test_parse_hhmm():
    assert parse_hhmm("08:05", "startTime").minute == 5
    with pytest.raises(ValidationError):
        parse_hhmm("8:5", "startTime")
    with pytest.raises(ValidationError):
        parse_hhmm("24:00", "startTime")

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import (
    ACADEMIC_YEAR_END_MONTH,
    ACADEMIC_YEAR_START_MONTH,
    DEFAULT_TIMEZONE,
    SEMESTER2_START_MONTH,
)
from ..core.enums import RangeType
from ..core.exceptions import ValidationError

_HHMM = re.compile(r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def label(self, kind: RangeType) -> str:
        if kind == RangeType.CUSTOM:
            return f"{self.start.isoformat()} → {self.end.isoformat()}"
        return kind.value


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_request_date(value: Optional[str], field_name: str) -> date:
    """Like parse_iso_date, but raises ValidationError for API input."""
    if not value:
        raise ValidationError(f"{field_name} обязателен")
    try:
        return parse_iso_date(str(value)[:10])
    except ValueError:
        raise ValidationError(f"{field_name} должен быть в формате YYYY-MM-DD")


def parse_request_datetime(value: Optional[str], field_name: str, tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """ISO-8601 timestamp from the client as naive local time of ``tz_name``."""
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} должен быть в формате ISO 8601")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)
    return parsed


def parse_hhmm(value: str, field_name: str) -> time:
    if not isinstance(value, str) or not _HHMM.match(value):
        raise ValidationError(f"{field_name} должен быть в формате HH:mm (например, 09:00)")
    hours, minutes = value.split(":")
    return time(hour=int(hours), minute=int(minutes))


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current wall-clock time in the attendance timezone (naive)."""
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def today_local(tz_name: str = DEFAULT_TIMEZONE) -> date:
    return now_local(tz_name).date()


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def academic_year_start(today: date) -> int:
    """Calendar year in which the current academic year began (1 September)."""
    return today.year if today.month >= ACADEMIC_YEAR_START_MONTH else today.year - 1


def current_course(admission_year: int, today: date) -> int:
    return academic_year_start(today) - int(admission_year) + 1


def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def parse_range_type(value: Optional[str]) -> RangeType:
    if not value:
        return RangeType.ACADEMIC_YEAR
    try:
        return RangeType(value)
    except ValueError:
        return RangeType.ACADEMIC_YEAR


def resolve_range(
    kind: RangeType,
    *,
    today: date,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> DateRange:
    """Translate a named period into inclusive calendar bounds.

    Unknown or incomplete custom periods fall back to the academic year.
    """

    year = academic_year_start(today)
    nxt = year + 1

    if kind == RangeType.CUSTOM and start and end:
        period = DateRange(parse_request_date(start, "start"), parse_request_date(end, "end"))
        if period.start > period.end:
            raise ValidationError("Начальная дата не может быть позже конечной")
        return period
    if kind == RangeType.TODAY:
        return DateRange(today, today)
    if kind == RangeType.WEEK:
        return DateRange(today - timedelta(days=6), today)
    if kind == RangeType.MONTH:
        return DateRange(today.replace(day=1), _month_end(today.year, today.month))
    if kind == RangeType.SEMESTER1:
        return DateRange(date(year, ACADEMIC_YEAR_START_MONTH, 1), _month_end(nxt, SEMESTER2_START_MONTH - 1))
    if kind == RangeType.SEMESTER2:
        return DateRange(date(nxt, SEMESTER2_START_MONTH, 1), _month_end(nxt, ACADEMIC_YEAR_END_MONTH))

    return DateRange(date(year, ACADEMIC_YEAR_START_MONTH, 1), _month_end(nxt, ACADEMIC_YEAR_END_MONTH))


def iter_days(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)

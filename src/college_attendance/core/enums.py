from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Роль пользователя, используется для разграничения доступа."""

    ADMIN = "ADMIN"
    HEAD = "HEAD"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class AttendanceStatus(str, Enum):
    """Статус посещаемости, хранимый в БД."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    SICK = "SICK"
    VALID_ABSENT = "VALID_ABSENT"
    ITHUB = "ITHUB"
    DUAL = "DUAL"
    LATE = "LATE"
    REMOTE = "REMOTE"


class RangeType(str, Enum):
    """Named reporting periods accepted by the stats and export endpoints."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    SEMESTER1 = "semester1"
    SEMESTER2 = "semester2"
    ACADEMIC_YEAR = "academic_year"
    CUSTOM = "custom"

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Callable

from .admin.service import AcademicYearService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_QR_TOKEN_TTL_MINUTES, DEFAULT_TIMEZONE, DEFAULT_TOKEN_TTL_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .groups.mysql_group_repository import MySQLGroupRepository
from .groups.service import GroupService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayService
from .practice.mysql_practice_repository import MySQLPracticeDayRepository
from .practice.service import PracticeService
from .qr.mysql_qr_repository import MySQLQRTokenRepository
from .qr.service import QRService
from .reports.export import ExportService
from .schedules.mysql_schedule_repository import MySQLGroupScheduleRepository, MySQLLessonSlotRepository
from .schedules.service import BellScheduleService, ScheduleService
from .specialties.mysql_specialty_repository import MySQLSpecialtyRepository
from .specialties.service import SpecialtyService
from .students.importer import StudentImporter
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    timezone: str
    clock: Callable[[], datetime]

    auth_service: AuthService
    user_service: UserService
    specialty_service: SpecialtyService
    group_service: GroupService
    student_service: StudentService
    student_importer: StudentImporter
    holiday_service: HolidayService
    schedule_service: ScheduleService
    bell_schedule_service: BellScheduleService
    practice_service: PracticeService
    attendance_service: AttendanceService
    qr_service: QRService
    export_service: ExportService
    academic_year_service: AcademicYearService


def build_services(
    *,
    users,
    specialties,
    groups,
    students,
    holidays,
    schedules,
    lesson_slots,
    practice_days,
    attendance,
    qr_tokens,
    secret_key: str,
    timezone: str = DEFAULT_TIMEZONE,
    token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS,
    qr_ttl_minutes: int = DEFAULT_QR_TOKEN_TTL_MINUTES,
    clock: Callable[[], datetime] | None = None,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, fakes in tests)."""
    clock = clock or partial(now_local, timezone)

    schedule_service = ScheduleService(schedules, groups)
    practice_service = PracticeService(practice_days, groups)

    return Container(
        timezone=timezone,
        clock=clock,
        auth_service=AuthService(users, secret_key=secret_key, ttl_hours=token_ttl_hours),
        user_service=UserService(users),
        specialty_service=SpecialtyService(specialties),
        group_service=GroupService(groups, specialties, users),
        student_service=StudentService(students, groups, users),
        student_importer=StudentImporter(students, groups),
        holiday_service=HolidayService(holidays),
        schedule_service=schedule_service,
        bell_schedule_service=BellScheduleService(lesson_slots),
        practice_service=practice_service,
        attendance_service=AttendanceService(
            attendance,
            students,
            groups,
            holidays,
            schedule_service,
            clock=clock,
            timezone=timezone,
        ),
        qr_service=QRService(qr_tokens, clock=clock, ttl_minutes=qr_ttl_minutes),
        export_service=ExportService(students, attendance, holidays, practice_service, clock=clock),
        academic_year_service=AcademicYearService(attendance, groups, specialties),
    )


def build_container(settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.DB_CONFIG))

    return build_services(
        users=MySQLUserRepository(conn),
        specialties=MySQLSpecialtyRepository(conn),
        groups=MySQLGroupRepository(conn),
        students=MySQLStudentRepository(conn),
        holidays=MySQLHolidayRepository(conn),
        schedules=MySQLGroupScheduleRepository(conn),
        lesson_slots=MySQLLessonSlotRepository(conn),
        practice_days=MySQLPracticeDayRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        qr_tokens=MySQLQRTokenRepository(conn),
        secret_key=settings.SECRET_KEY,
        timezone=getattr(settings, "ATTENDANCE_TIMEZONE", DEFAULT_TIMEZONE),
        token_ttl_hours=getattr(settings, "TOKEN_TTL_HOURS", DEFAULT_TOKEN_TTL_HOURS),
        qr_ttl_minutes=getattr(settings, "QR_TOKEN_TTL_MINUTES", DEFAULT_QR_TOKEN_TTL_MINUTES),
    )

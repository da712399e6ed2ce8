from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from types import SimpleNamespace
from typing import Iterable, Optional

import pytest
from werkzeug.security import generate_password_hash

from college_attendance.attendance.model import AttendanceFilter, AttendanceLogRow, AttendanceRecord
from college_attendance.container import build_services
from college_attendance.core.enums import AttendanceStatus, Role
from college_attendance.groups.model import Group
from college_attendance.holidays.model import Holiday
from college_attendance.practice.model import PracticeDay
from college_attendance.qr.model import QRToken
from college_attendance.schedules.model import GroupSchedule, LessonSlot
from college_attendance.specialties.model import Specialty
from college_attendance.students.model import Student
from college_attendance.users.model import User

# Wednesday, 09:20 local time.
FIXED_NOW = datetime(2026, 10, 14, 9, 20, 0)


class InMemoryUsers:
    def __init__(self):
        self.items: dict[int, User] = {}
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.items.get(int(user_id))

    def get_by_login(self, login: str) -> Optional[User]:
        return next((u for u in self.items.values() if u.login == login), None)

    def list_all(self, *, roles: Optional[Iterable[Role]] = None):
        wanted = set(roles) if roles else None
        return [u for u in self.items.values() if wanted is None or u.role in wanted]

    def create(self, *, login: str, full_name: Optional[str], password_hash: str, role: Role) -> User:
        self._id += 1
        user = User(user_id=self._id, login=login, full_name=full_name, password_hash=password_hash, role=role)
        self.items[self._id] = user
        return user

    def update(self, user_id: int, fields: dict) -> Optional[User]:
        current = self.items.get(int(user_id))
        if not current:
            return None
        self.items[current.user_id] = replace(current, **fields)
        return self.items[current.user_id]

    def delete(self, user_id: int) -> bool:
        return self.items.pop(int(user_id), None) is not None


class InMemorySpecialties:
    def __init__(self):
        self.items: dict[int, Specialty] = {}
        self._id = 0

    def get_by_id(self, specialty_id: int) -> Optional[Specialty]:
        return self.items.get(int(specialty_id))

    def get_by_code(self, code: str) -> Optional[Specialty]:
        return next((s for s in self.items.values() if s.code == code), None)

    def list_all(self):
        return list(self.items.values())

    def create(self, *, code: str, name: str, duration_years: int) -> Specialty:
        self._id += 1
        specialty = Specialty(specialty_id=self._id, code=code, name=name, duration_years=duration_years)
        self.items[self._id] = specialty
        return specialty

    def update(self, specialty_id: int, fields: dict) -> Optional[Specialty]:
        current = self.items.get(int(specialty_id))
        if not current:
            return None
        self.items[current.specialty_id] = replace(current, **fields)
        return self.items[current.specialty_id]

    def delete(self, specialty_id: int) -> bool:
        return self.items.pop(int(specialty_id), None) is not None


class InMemoryGroups:
    def __init__(self):
        self.items: dict[int, Group] = {}
        self._id = 0

    def get_by_id(self, group_id: int) -> Optional[Group]:
        return self.items.get(int(group_id))

    def get_by_name(self, name: str) -> Optional[Group]:
        return next((g for g in self.items.values() if g.name == name), None)

    def get_by_curator(self, curator_id: int) -> Optional[Group]:
        return next((g for g in self.items.values() if g.curator_id == curator_id), None)

    def list_all(self):
        return sorted(self.items.values(), key=lambda g: g.name)

    def list_by_ids(self, group_ids: Iterable[int]):
        ids = {int(g) for g in group_ids}
        return [g for g in self.list_all() if g.group_id in ids]

    def create(self, *, name, admission_year, course, specialty_id, curator_id) -> Group:
        self._id += 1
        group = Group(
            group_id=self._id,
            name=name,
            admission_year=admission_year,
            course=course,
            specialty_id=specialty_id,
            curator_id=curator_id,
        )
        self.items[self._id] = group
        return group

    def update(self, group_id: int, fields: dict) -> Optional[Group]:
        current = self.items.get(int(group_id))
        if not current:
            return None
        self.items[current.group_id] = replace(current, **fields)
        return self.items[current.group_id]

    def delete(self, group_id: int) -> bool:
        return self.items.pop(int(group_id), None) is not None


class InMemoryStudents:
    def __init__(self, groups: InMemoryGroups):
        self.items: dict[int, Student] = {}
        self._groups = groups
        self._id = 0

    def _with_group(self, student: Student) -> Student:
        group = self._groups.get_by_id(student.group_id)
        return replace(student, group_name=group.name if group else None)

    def get_by_id(self, student_id: int) -> Optional[Student]:
        student = self.items.get(int(student_id))
        return self._with_group(student) if student else None

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        student = next((s for s in self.items.values() if s.user_id == user_id), None)
        return self._with_group(student) if student else None

    def find_by_full_name(self, full_name: str) -> Optional[Student]:
        student = next((s for s in self.items.values() if s.full_name == full_name), None)
        return self._with_group(student) if student else None

    def list(self, *, group_id: Optional[int] = None):
        return [
            self._with_group(s)
            for s in sorted(self.items.values(), key=lambda s: s.full_name)
            if group_id is None or s.group_id == group_id
        ]

    def list_by_group_ids(self, group_ids: Iterable[int]):
        ids = {int(g) for g in group_ids}
        return [s for s in self.list() if s.group_id in ids]

    def create(self, *, full_name: str, group_id: int, user_id: Optional[int] = None) -> Student:
        self._id += 1
        self.items[self._id] = Student(student_id=self._id, full_name=full_name, group_id=group_id, user_id=user_id)
        return self.get_by_id(self._id)

    def create_many(self, rows) -> int:
        count = 0
        for full_name, group_id in rows:
            self.create(full_name=full_name, group_id=group_id)
            count += 1
        return count

    def update(self, student_id: int, fields: dict) -> Optional[Student]:
        current = self.items.get(int(student_id))
        if not current:
            return None
        self.items[current.student_id] = replace(current, **fields)
        return self.get_by_id(current.student_id)

    def delete(self, student_id: int) -> bool:
        return self.items.pop(int(student_id), None) is not None


class InMemoryHolidays:
    def __init__(self):
        self.items: dict[int, Holiday] = {}
        self._id = 0

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        return self.items.get(int(holiday_id))

    def get_by_date(self, day: date) -> Optional[Holiday]:
        return next((h for h in self.items.values() if h.date == day), None)

    def list(self, *, start: Optional[date] = None, end: Optional[date] = None):
        return sorted(
            (
                h
                for h in self.items.values()
                if (start is None or h.date >= start) and (end is None or h.date <= end)
            ),
            key=lambda h: h.date,
        )

    def create(self, *, day: date, name: str) -> Holiday:
        self._id += 1
        self.items[self._id] = Holiday(holiday_id=self._id, date=day, name=name)
        return self.items[self._id]

    def update(self, holiday_id: int, fields: dict) -> Optional[Holiday]:
        current = self.items.get(int(holiday_id))
        if not current:
            return None
        self.items[current.holiday_id] = replace(current, **fields)
        return self.items[current.holiday_id]

    def delete(self, holiday_id: int) -> bool:
        return self.items.pop(int(holiday_id), None) is not None


class InMemorySchedules:
    def __init__(self):
        self.items: dict[int, GroupSchedule] = {}
        self._id = 0

    def get_by_id(self, schedule_id: int) -> Optional[GroupSchedule]:
        return self.items.get(int(schedule_id))

    def get_for_group_and_day(self, group_id: int, day_of_week: int) -> Optional[GroupSchedule]:
        return next(
            (s for s in self.items.values() if s.group_id == group_id and s.day_of_week == day_of_week),
            None,
        )

    def list(self, *, group_id: Optional[int] = None):
        return [s for s in self.items.values() if group_id is None or s.group_id == group_id]

    def create(self, *, group_id: int, day_of_week: int, start_time, end_time) -> GroupSchedule:
        self._id += 1
        self.items[self._id] = GroupSchedule(
            schedule_id=self._id,
            group_id=group_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
        )
        return self.items[self._id]

    def update(self, schedule_id: int, fields: dict) -> Optional[GroupSchedule]:
        current = self.items.get(int(schedule_id))
        if not current:
            return None
        self.items[current.schedule_id] = replace(current, **fields)
        return self.items[current.schedule_id]

    def delete(self, schedule_id: int) -> bool:
        return self.items.pop(int(schedule_id), None) is not None


class InMemoryLessonSlots:
    def __init__(self):
        self.items: dict[tuple[int, int], LessonSlot] = {}

    def list(self, *, day_of_week: Optional[int] = None):
        return sorted(
            (s for s in self.items.values() if day_of_week is None or s.day_of_week == day_of_week),
            key=lambda s: (s.day_of_week, s.pair_number),
        )

    def upsert_many(self, slots) -> int:
        count = 0
        for slot in slots:
            self.items[(slot.day_of_week, slot.pair_number)] = slot
            count += 1
        return count


class InMemoryPracticeDays:
    def __init__(self):
        self.items: dict[tuple[int, date], PracticeDay] = {}
        self._id = 0

    def get(self, group_id: int, day: date) -> Optional[PracticeDay]:
        return self.items.get((group_id, day))

    def upsert(self, *, group_id: int, day: date, name: Optional[str]) -> PracticeDay:
        current = self.items.get((group_id, day))
        if current:
            self.items[(group_id, day)] = replace(current, name=name)
        else:
            self._id += 1
            self.items[(group_id, day)] = PracticeDay(practice_id=self._id, group_id=group_id, date=day, name=name)
        return self.items[(group_id, day)]

    def list_between(self, start: date, end: date, *, group_ids=None):
        ids = set(group_ids) if group_ids is not None else None
        return sorted(
            (
                p
                for p in self.items.values()
                if start <= p.date <= end and (ids is None or p.group_id in ids)
            ),
            key=lambda p: (p.date, p.group_id),
        )


class InMemoryAttendance:
    def __init__(self, students: InMemoryStudents, groups: InMemoryGroups):
        self.items: dict[int, AttendanceRecord] = {}
        self.archives: dict[str, list[AttendanceRecord]] = {}
        self._students = students
        self._groups = groups
        self._id = 0

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.items.get(int(attendance_id))

    def get_for_student_and_date(self, student_id: int, day: date) -> Optional[AttendanceRecord]:
        return next((r for r in self.items.values() if r.student_id == student_id and r.date == day), None)

    def list(self, flt: AttendanceFilter):
        return [
            r
            for r in sorted(self.items.values(), key=lambda r: (r.date, r.attendance_id))
            if (flt.group_id is None or r.group_id == flt.group_id)
            and (flt.student_id is None or r.student_id == flt.student_id)
            and (flt.start is None or r.date >= flt.start)
            and (flt.end is None or r.date <= flt.end)
        ]

    def list_log(self, flt: AttendanceFilter):
        rows = []
        for r in self.list(flt):
            student = self._students.get_by_id(r.student_id)
            group = self._groups.get_by_id(r.group_id)
            rows.append(
                AttendanceLogRow(
                    attendance_id=r.attendance_id,
                    student_id=r.student_id,
                    group_id=r.group_id,
                    full_name=student.full_name if student else "",
                    group_name=group.name if group else "",
                    status=r.status,
                    date=r.date,
                    updated_at=r.updated_at,
                    updated_by=None,
                )
            )
        return rows

    def list_for_students(self, student_ids, *, start: date, end: date):
        ids = set(student_ids)
        return [r for r in self.items.values() if r.student_id in ids and start <= r.date <= end]

    def create(self, *, student_id, group_id, day, status, updated_by_id, marked_at=None, late_minutes=None):
        self._id += 1
        self.items[self._id] = AttendanceRecord(
            attendance_id=self._id,
            student_id=student_id,
            group_id=group_id,
            date=day,
            status=status,
            updated_at=FIXED_NOW,
            updated_by_id=updated_by_id,
            marked_at=marked_at,
            late_minutes=late_minutes,
        )
        return self.items[self._id]

    def update(
        self,
        attendance_id,
        *,
        status,
        updated_by_id,
        marked_at,
        late_minutes,
        day=None,
        student_id=None,
        group_id=None,
    ):
        current = self.items.get(int(attendance_id))
        if not current:
            return None
        self.items[current.attendance_id] = replace(
            current,
            status=status,
            updated_by_id=updated_by_id,
            marked_at=marked_at,
            late_minutes=late_minutes,
            date=day or current.date,
            student_id=student_id or current.student_id,
            group_id=group_id or current.group_id,
        )
        return self.items[current.attendance_id]

    def delete(self, attendance_id: int) -> bool:
        return self.items.pop(int(attendance_id), None) is not None

    def archive_all(self, archive_table: str) -> int:
        archived = list(self.items.values())
        self.archives.setdefault(archive_table, []).extend(archived)
        self.items.clear()
        return len(archived)


class InMemoryQRTokens:
    def __init__(self):
        self.items: dict[str, QRToken] = {}

    def get(self, token: str) -> Optional[QRToken]:
        return self.items.get(token)

    def create(self, *, token: str, teacher_id: int, lesson_id: int, expires_at: datetime) -> QRToken:
        self.items[token] = QRToken(token=token, teacher_id=teacher_id, lesson_id=lesson_id, expires_at=expires_at)
        return self.items[token]

    def delete_for_lesson(self, teacher_id: int, lesson_id: int) -> int:
        stale = [t for t, r in self.items.items() if r.teacher_id == teacher_id and r.lesson_id == lesson_id]
        for t in stale:
            del self.items[t]
        return len(stale)


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def clock(fixed_now) -> Clock:
    return Clock(fixed_now)


@pytest.fixture
def repos():
    groups = InMemoryGroups()
    students = InMemoryStudents(groups)
    return SimpleNamespace(
        users=InMemoryUsers(),
        specialties=InMemorySpecialties(),
        groups=groups,
        students=students,
        holidays=InMemoryHolidays(),
        schedules=InMemorySchedules(),
        lesson_slots=InMemoryLessonSlots(),
        practice_days=InMemoryPracticeDays(),
        attendance=InMemoryAttendance(students, groups),
        qr_tokens=InMemoryQRTokens(),
    )


@pytest.fixture
def services(repos, clock):
    return build_services(
        users=repos.users,
        specialties=repos.specialties,
        groups=repos.groups,
        students=repos.students,
        holidays=repos.holidays,
        schedules=repos.schedules,
        lesson_slots=repos.lesson_slots,
        practice_days=repos.practice_days,
        attendance=repos.attendance,
        qr_tokens=repos.qr_tokens,
        secret_key="test-secret",
        timezone="Asia/Almaty",
        clock=clock,
    )


@pytest.fixture
def college(repos):
    """A small college: one specialty, two groups, three students, a teacher and a head."""
    admin = repos.users.create(
        login="admin", full_name="Администратор", password_hash=generate_password_hash("admin123"), role=Role.ADMIN
    )
    head = repos.users.create(
        login="head", full_name="Завуч", password_hash=generate_password_hash("head123"), role=Role.HEAD
    )
    teacher = repos.users.create(
        login="teacher", full_name="Иванова Анна", password_hash=generate_password_hash("teacher123"), role=Role.TEACHER
    )
    student_user = repos.users.create(
        login="student", full_name="Петров Пётр", password_hash=generate_password_hash("student123"), role=Role.STUDENT
    )

    specialty = repos.specialties.create(code="09.02.07", name="Информационные системы", duration_years=4)
    is21 = repos.groups.create(
        name="ИС-21", admission_year=2023, course=4, specialty_id=specialty.specialty_id, curator_id=teacher.user_id
    )
    is24 = repos.groups.create(
        name="ИС-24", admission_year=2026, course=1, specialty_id=specialty.specialty_id, curator_id=None
    )

    petrov = repos.students.create(full_name="Петров Пётр", group_id=is21.group_id, user_id=student_user.user_id)
    sidorov = repos.students.create(full_name="Сидоров Иван", group_id=is21.group_id)
    orlova = repos.students.create(full_name="Орлова Мария", group_id=is24.group_id)

    repos.schedules.create(group_id=is21.group_id, day_of_week=3, start_time=time(9, 0), end_time=None)

    return SimpleNamespace(
        admin=admin,
        head=head,
        teacher=teacher,
        student_user=student_user,
        specialty=specialty,
        is21=is21,
        is24=is24,
        petrov=petrov,
        sidorov=sidorov,
        orlova=orlova,
    )


@pytest.fixture
def app(services, monkeypatch):
    from college_attendance.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    flask_app = create_app(container=services)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(user_login: str, password: str) -> dict:
        resp = client.post("/api/auth/login", json={"login": user_login, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return {"Authorization": f"Bearer {resp.get_json()['token']}"}

    return _login

from __future__ import annotations

import pytest

from college_attendance.core.exceptions import NotFoundError, ValidationError


def test_create_group_by_specialty_code(services, college, today):
    group = services.group_service.create(
        {"name": "ИС-25", "specialtyCode": "09.02.07", "course": 1, "admissionYear": 2026, "curatorId": college.head.user_id}
    )
    assert group.specialty_id == college.specialty.specialty_id
    assert group.curator_id == college.head.user_id
    assert group.to_dict(today=today)["currentCourse"] == 1


def test_create_group_requires_fields(services, college):
    with pytest.raises(ValidationError, match="Заполните"):
        services.group_service.create({"name": "ИС-25"})


def test_create_group_rejects_duplicates_and_unknown_specialty(services, college):
    with pytest.raises(ValidationError):
        services.group_service.create({"name": "ИС-21", "specialtyCode": "09.02.07", "course": 1, "admissionYear": 2026})
    with pytest.raises(ValidationError):
        services.group_service.create({"name": "ИС-25", "specialtyCode": "00.00.00", "course": 1, "admissionYear": 2026})


def test_curator_can_lead_only_one_group(services, college):
    with pytest.raises(ValidationError, match="куратор"):
        services.group_service.update(college.is24.group_id, {"curatorId": college.teacher.user_id})

    # re-assigning the same curator to their own group is fine
    same = services.group_service.update(college.is21.group_id, {"curatorId": college.teacher.user_id})
    assert same.curator_id == college.teacher.user_id


def test_students_cannot_be_curators(services, college):
    with pytest.raises(ValidationError):
        services.group_service.update(college.is24.group_id, {"curatorId": college.student_user.user_id})


@pytest.mark.parametrize("empty", [None, "", "null"])
def test_curator_can_be_cleared(services, college, empty):
    group = services.group_service.update(college.is21.group_id, {"curatorId": empty})
    assert group.curator_id is None


def test_update_only_touches_present_keys(services, college):
    group = services.group_service.update(college.is21.group_id, {"course": 3})
    assert group.course == 3
    assert group.name == "ИС-21"
    assert group.curator_id == college.teacher.user_id


def test_delete_group(services, college):
    services.group_service.delete(college.is24.group_id)
    with pytest.raises(NotFoundError):
        services.group_service.get(college.is24.group_id)


def test_specialty_code_must_be_unique(services, college):
    with pytest.raises(ValidationError):
        services.specialty_service.create(code="09.02.07", name="Дубликат")
    with pytest.raises(ValidationError):
        services.specialty_service.create(code="10.02.05", name="Безопасность", duration_years=0)

    created = services.specialty_service.create(code="10.02.05", name="Безопасность", duration_years=3)
    assert services.specialty_service.update(created.specialty_id, {"durationYears": 4}).duration_years == 4

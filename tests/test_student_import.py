from __future__ import annotations

import io

import pytest
from openpyxl import Workbook

from college_attendance.core.exceptions import NotFoundError, ValidationError
from college_attendance.students.importer import normalize_group_name, read_rows


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("ИС-21", "ис-21"),
        ("ис 21", "ис21"),
        ("Ис–21", "ис-21"),
        ("ИСы—21!", "иси-21"),
        ("Ёлка-1", "елка-1"),
        (None, ""),
    ],
)
def test_normalize_group_name(raw, expected):
    assert normalize_group_name(raw) == expected


def test_import_rows_matches_loose_group_names(services, repos, college):
    rows = [
        (2, ["Кузнецов", "Олег", "Игоревич", "ис 21"]),
        (3, ["Смирнова", "Анна", "", "ИС–24"]),
        (4, ["Петров", "Пётр", "", "ИС-21"]),  # already in the group
        (5, ["Без", "Группы", "", "ЭК-11"]),
        (6, ["", "Имя", "", "ИС-21"]),
        (7, ["Мало"]),
    ]
    result = services.student_importer.import_rows(rows)

    assert result.total_in_file == 6
    assert result.imported_count == 2
    assert result.skipped_count == 1
    assert result.errors_count == 3
    assert result.not_found_groups == ["ЭК-11"]
    assert result.message == "Добавлено: 2 | Пропущено: 1 | Ошибок: 3"

    names = {s.full_name: s.group_id for s in repos.students.list()}
    assert names["Кузнецов Олег Игоревич"] == college.is21.group_id
    assert names["Смирнова Анна"] == college.is24.group_id


def test_import_rows_skips_duplicates_within_file(services, college):
    rows = [
        (2, ["Новиков", "Илья", "", "ИС-24"]),
        (3, ["Новиков", "Илья", "", "ис-24"]),
    ]
    result = services.student_importer.import_rows(rows)
    assert result.imported_count == 1
    assert result.skipped_count == 1
    assert "errors" not in result.to_dict()


def test_import_file_reads_first_sheet(services, college):
    wb = Workbook()
    ws = wb.active
    ws.append(["Фамилия", "Имя", "Отчество", "Группа"])
    ws.append(["Кузнецов", "Олег", "Игоревич", "ИС-21"])
    ws.append([None, None, None, None])
    ws.append(["Смирнова", "Анна", None, "ИС-24"])
    buf = io.BytesIO()
    wb.save(buf)

    rows = read_rows(buf.getvalue())
    assert [number for number, _ in rows] == [2, 4]
    assert rows[1][1][:4] == ["Смирнова", "Анна", "", "ИС-24"]

    result = services.student_importer.import_file(buf.getvalue())
    assert result.imported_count == 2


def test_import_file_rejects_garbage(services):
    with pytest.raises(ValidationError, match="Файл не обработан"):
        services.student_importer.import_file(b"not an excel file")


def test_student_crud(services, college):
    created = services.student_service.create({"fullName": "Новиков Илья", "groupId": college.is24.group_id})
    assert created.group_name == "ИС-24"

    moved = services.student_service.update(created.student_id, {"groupId": college.is21.group_id})
    assert moved.group_id == college.is21.group_id

    with pytest.raises(ValidationError, match="Нет данных"):
        services.student_service.update(created.student_id, {})
    with pytest.raises(ValidationError):
        services.student_service.create({"fullName": "Х", "groupId": 999})

    services.student_service.delete(created.student_id)
    with pytest.raises(NotFoundError):
        services.student_service.get(created.student_id)

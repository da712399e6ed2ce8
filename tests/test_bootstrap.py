from __future__ import annotations

from pathlib import Path

from college_attendance.database.bootstrap import _strip_create_db_and_use, iter_sql_statements

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def test_split_ignores_semicolons_in_literals():
    sql = "INSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES (\"c;d\");  SELECT 1"
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_split_handles_escaped_quotes():
    sql = "INSERT INTO t VALUES ('it\\'s; fine');"
    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('it\\'s; fine')"]


def test_schema_file_creates_every_table():
    sql = _strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))
    assert statements
    assert not any(s.upper().startswith(("CREATE DATABASE", "USE ")) for s in statements)

    joined = "\n".join(statements)
    for table in (
        "users",
        "specialties",
        "student_groups",
        "students",
        "holidays",
        "group_schedules",
        "lesson_slots",
        "practice_days",
        "attendance_records",
        "qr_tokens",
    ):
        assert f"CREATE TABLE IF NOT EXISTS {table} (" in joined

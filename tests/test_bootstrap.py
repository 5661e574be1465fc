from __future__ import annotations

from pathlib import Path

from src.timeclock_system.timeclock_system.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def test_splitter_ignores_semicolons_in_literals_and_comments():
    sql = """
    -- employee's note; not a statement
    INSERT INTO companies (fiscal_name, nif) VALUES ('Bar; Cafe', 'B1');
    INSERT INTO companies (fiscal_name, nif) VALUES ("O\\'Neil", 'B2')
    """
    statements = list(_iter_sql_statements(sql))

    assert len(statements) == 2
    assert "'Bar; Cafe'" in statements[0]
    assert statements[1].endswith("'B2')")


def test_create_database_and_use_are_removed():
    sql = "CREATE DATABASE IF NOT EXISTS other_db;\nUSE other_db;\nCREATE TABLE t (id INT);"
    assert list(_iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]


def test_schema_file_defines_every_table():
    statements = list(_iter_sql_statements(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))))
    created = " ".join(s for s in statements if s.upper().startswith("CREATE TABLE"))

    for table in (
        "companies",
        "employee_profiles",
        "supervisor_profiles",
        "time_entries",
        "time_requests",
        "planner_requests",
    ):
        assert table in created

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DBConfig, DatabaseConnection


def _connect(db_config: dict, *, with_database: bool = True):
    # Scripts run before the app container exists, so no shared instance here.
    return DatabaseConnection(DBConfig.from_dict(db_config)).connect(with_database=with_database)


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the SQL file.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def _iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema/seed script on ';', ignoring semicolons inside quoted literals."""
    sql = _strip_line_comments(sql)
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in _iter_sql_statements(sql):
        cur.execute(stmt)


def _apply_sql_file(db_config: dict, path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    database = DBConfig.from_dict(db_config).database
    conn = _connect(db_config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _apply_sql_file(db_config, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _apply_sql_file(db_config, seed_path)


def ensure_demo_profiles(db_config: dict) -> None:
    """Upsert one supervisor and two employees with known PINs for local testing."""

    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)

        cur.execute("SELECT company_id FROM companies WHERE nif=%s", ("B00000000",))
        row = cur.fetchone()
        if row:
            company_id = int(row["company_id"])
        else:
            cur.execute(
                "INSERT INTO companies (fiscal_name, nif) VALUES (%s, %s)",
                ("Demo Company S.L.", "B00000000"),
            )
            company_id = int(cur.lastrowid)

        def upsert_profile(table: str, profile_id: str, email: str, fiscal_name: str, pin: str, work_centers: list[str]) -> None:
            pin_hash = generate_password_hash(pin)
            centers = json.dumps(work_centers)
            cur.execute(f"SELECT id FROM {table} WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    f"""
                    UPDATE {table}
                    SET fiscal_name=%s, pin_hash=%s, work_centers=%s, company_id=%s, is_active=1
                    WHERE email=%s
                    """,
                    (fiscal_name, pin_hash, centers, company_id, email),
                )
            else:
                cur.execute(
                    f"""
                    INSERT INTO {table} (id, email, fiscal_name, pin_hash, work_centers, company_id)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (profile_id, email, fiscal_name, pin_hash, centers, company_id),
                )

        upsert_profile("supervisor_profiles", "sup-0001", "supervisor@example.com", "Supervisor Demo", "1234", ["Madrid", "Toledo"])
        upsert_profile("employee_profiles", "emp-0001", "ana@example.com", "Ana García", "1111", ["Madrid"])
        upsert_profile("employee_profiles", "emp-0002", "luis@example.com", "Luis Pérez", "2222", ["Madrid", "Toledo"])

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

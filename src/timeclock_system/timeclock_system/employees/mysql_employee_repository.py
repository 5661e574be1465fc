from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.constants import DEFAULT_TIMEZONE
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, decode_json_list, fetchall, fetchone
from .model import Company, Employee, Supervisor
from .repository import EmployeeRepository

_EMPLOYEE_COLUMNS = "id, email, fiscal_name, pin_hash, is_active, timezone, document_number, work_centers"


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=str(r["id"]),
        email=r["email"],
        fiscal_name=r["fiscal_name"],
        pin_hash=r["pin_hash"],
        work_centers=decode_json_list(r.get("work_centers")),
        document_number=r.get("document_number"),
        timezone=r.get("timezone") or DEFAULT_TIMEZONE,
        is_active=bool(r["is_active"]),
    )


def _row_to_supervisor(r: dict) -> Supervisor:
    company = None
    if r.get("company_fiscal_name"):
        company = Company(fiscal_name=r["company_fiscal_name"], nif=r.get("company_nif") or "")
    return Supervisor(
        supervisor_id=str(r["id"]),
        email=r["email"],
        fiscal_name=r["fiscal_name"],
        pin_hash=r["pin_hash"],
        work_centers=decode_json_list(r.get("work_centers")),
        company=company,
        is_active=bool(r["is_active"]),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_employee_where(self, where: str, value: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employee_profiles WHERE {where}=%s", (value,))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        return self._get_employee_where("id", str(employee_id))

    def get_employee_by_email(self, email: str) -> Optional[Employee]:
        return self._get_employee_where("email", email.strip().lower())

    def _get_supervisor_where(self, where: str, value: str) -> Optional[Supervisor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT s.id, s.email, s.fiscal_name, s.pin_hash, s.is_active, s.work_centers,
                       c.fiscal_name AS company_fiscal_name, c.nif AS company_nif
                FROM supervisor_profiles s
                LEFT JOIN companies c ON c.company_id = s.company_id
                WHERE s.{where}=%s
                """,
                (value,),
            )
            r = fetchone(cur)
            return _row_to_supervisor(r) if r else None

    def get_supervisor(self, supervisor_id: str) -> Optional[Supervisor]:
        return self._get_supervisor_where("id", str(supervisor_id))

    def get_supervisor_by_email(self, email: str) -> Optional[Supervisor]:
        return self._get_supervisor_where("email", email.strip().lower())

    def list_employees_for_work_centers(self, work_centers: Sequence[str]) -> Sequence[Employee]:
        centers = [str(c) for c in work_centers]
        if not centers:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}
                FROM employee_profiles
                WHERE is_active=1 AND JSON_OVERLAPS(work_centers, %s)
                ORDER BY fiscal_name ASC
                """,
                (json.dumps(centers),),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def update_employee_pin(self, employee_id: str, pin_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employee_profiles SET pin_hash=%s WHERE id=%s AND is_active=1",
                (pin_hash, str(employee_id)),
            )
            return cur.rowcount > 0

from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_HOURS_LIMIT, DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService
from .reports.service import ReportService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .time_entries.service import ClockService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    time_entries_repo: TimeEntryRepository
    requests_repo: RequestRepository

    auth_service: AuthService
    clock_service: ClockService
    report_service: ReportService
    request_service: RequestService


def build_services(
    *,
    employees_repo: EmployeeRepository,
    time_entries_repo: TimeEntryRepository,
    requests_repo: RequestRepository,
    timezone: str = DEFAULT_TIMEZONE,
    hours_limit: float = DEFAULT_HOURS_LIMIT,
) -> Container:
    """Wire services over any repositories that satisfy the repository protocols."""

    return Container(
        employees_repo=employees_repo,
        time_entries_repo=time_entries_repo,
        requests_repo=requests_repo,
        auth_service=AuthService(employees_repo),
        clock_service=ClockService(time_entries_repo, employees_repo),
        report_service=ReportService(
            time_entries_repo,
            employees_repo,
            timezone=timezone,
            hours_limit=hours_limit,
        ),
        request_service=RequestService(requests_repo, time_entries_repo, employees_repo),
    )


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    hours_limit: float = DEFAULT_HOURS_LIMIT,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        employees_repo=MySQLEmployeeRepository(conn),
        time_entries_repo=MySQLTimeEntryRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        timezone=timezone,
        hours_limit=hours_limit,
    )

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Optional

from ..common.datetime_utils import format_duration
from ..employees.model import Company, Employee
from ..worktime.official import OfficialDayRow


@dataclass(frozen=True)
class DailyReportRow:
    employee: Employee
    work_date: date
    total_hours: float

    def to_dict(self) -> dict:
        return {
            "employee": self.employee.summary(),
            "date": self.work_date.strftime("%Y-%m-%d"),
            "total_hours": self.total_hours,
        }


@dataclass(frozen=True)
class AnnualReportRow:
    employee: Employee
    year: int
    monthly_hours: list[float]

    @property
    def total_hours(self) -> float:
        return sum(self.monthly_hours)

    def to_dict(self) -> dict:
        return {
            "employee": self.employee.summary(),
            "year": self.year,
            "monthly_hours": list(self.monthly_hours),
            "total_hours": self.total_hours,
        }


@dataclass(frozen=True)
class AlarmReportRow:
    employee: Employee
    start: date
    end: date
    total_hours: float
    hours_limit: float

    @property
    def excess_hours(self) -> float:
        return self.total_hours - self.hours_limit

    def to_dict(self) -> dict:
        return {
            "employee": self.employee.summary(),
            "start": self.start.strftime("%Y-%m-%d"),
            "end": self.end.strftime("%Y-%m-%d"),
            "total_hours": self.total_hours,
            "hours_limit": self.hours_limit,
            "excess_hours": self.excess_hours,
        }


@dataclass(frozen=True)
class OfficialReport:
    """Monthly working-time record of one employee (one row per day)."""

    employee: Employee
    start: date
    end: date
    days: list[OfficialDayRow]
    company: Optional[Company] = None

    @property
    def total_hours(self) -> float:
        return sum(d.total_hours for d in self.days)

    def to_dict(self, tz: tzinfo) -> dict:
        return {
            "employee": self.employee.summary(),
            "company": {"fiscal_name": self.company.fiscal_name, "nif": self.company.nif} if self.company else None,
            "start": self.start.strftime("%Y-%m-%d"),
            "end": self.end.strftime("%Y-%m-%d"),
            "daily_reports": [d.to_dict(tz) for d in self.days],
            "total_hours": self.total_hours,
        }


@dataclass(frozen=True)
class DashboardRow:
    employee: Employee
    today_ms: int
    total_ms: int
    is_open_session: bool

    def to_dict(self) -> dict:
        return {
            "employee": self.employee.summary(),
            "today_ms": self.today_ms,
            "today": format_duration(self.today_ms),
            "total_ms": self.total_ms,
            "total": format_duration(self.total_ms),
            "is_open_session": self.is_open_session,
        }


@dataclass(frozen=True)
class Dashboard:
    rows: list[DashboardRow] = field(default_factory=list)

    @property
    def total_ms(self) -> int:
        return sum(r.total_ms for r in self.rows)

    def to_dict(self) -> dict:
        return {
            "employees": [r.to_dict() for r in self.rows],
            "total_ms": self.total_ms,
            "total": format_duration(self.total_ms),
        }

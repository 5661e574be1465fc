from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import end_of_day, get_zone, local_date, ms_to_hours, now_utc, start_of_day
from ..core.constants import DEFAULT_HOURS_LIMIT, DEFAULT_TIMEZONE
from ..core.enums import ReportType
from ..core.exceptions import AuthorizationError, ValidationError
from ..employees.model import Company, Employee
from ..employees.repository import EmployeeRepository
from ..time_entries.model import TimeEvent
from ..time_entries.repository import TimeEntryRepository
from ..worktime.official import build_official_rows
from ..worktime.ordering import group_by_employee, is_open_session, latest_event
from ..worktime.windows import carry_in, daily_total, monthly_buckets, per_day_totals, range_total
from .model import AlarmReportRow, AnnualReportRow, Dashboard, DailyReportRow, DashboardRow, OfficialReport

logger = logging.getLogger(__name__)


class ReportService:
    """Use case: supervisor reports and dashboard.

    Fetches one snapshot of events per call and hands it to the ``worktime``
    functions; nothing is cached between calls.
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        employees: EmployeeRepository,
        *,
        timezone: str = DEFAULT_TIMEZONE,
        hours_limit: float = DEFAULT_HOURS_LIMIT,
    ):
        self._entries = entries
        self._employees = employees
        self._tz = get_zone(timezone)
        self._hours_limit = float(hours_limit)

    @property
    def tz(self):
        return self._tz

    @staticmethod
    def _check_range(start: date, end: date) -> None:
        if end < start:
            raise ValidationError("End date must not be before start date")

    def _snapshot(
        self,
        work_centers: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> tuple[list[Employee], dict[str, list[TimeEvent]]]:
        employees = list(self._employees.list_employees_for_work_centers(work_centers))
        if not employees:
            return [], {}

        events = self._entries.list_for_employees([e.employee_id for e in employees], start=start, end=end)
        by_employee = group_by_employee(events)

        known = {e.employee_id for e in employees}
        for employee_id in by_employee.keys() - known:
            logger.debug("skipping %d entries of unknown employee %s", len(by_employee[employee_id]), employee_id)
        return employees, by_employee

    def daily_report(self, work_centers: Sequence[str], start: date, end: date) -> list[DailyReportRow]:
        self._check_range(start, end)
        employees, by_employee = self._snapshot(
            work_centers, start_of_day(start, self._tz), end_of_day(end, self._tz)
        )

        rows: list[DailyReportRow] = []
        for employee in employees:
            events = by_employee.get(employee.employee_id)
            if not events:
                continue
            for work_date, total_ms in per_day_totals(events, self._tz).items():
                rows.append(DailyReportRow(employee=employee, work_date=work_date, total_hours=ms_to_hours(total_ms)))
        return rows

    def annual_report(self, work_centers: Sequence[str], year: int) -> list[AnnualReportRow]:
        start = date(year, 1, 1)
        end = date(year, 12, 31)
        employees, by_employee = self._snapshot(
            work_centers, start_of_day(start, self._tz), end_of_day(end, self._tz)
        )

        return [
            AnnualReportRow(
                employee=employee,
                year=year,
                monthly_hours=monthly_buckets(by_employee[employee.employee_id], year, self._tz),
            )
            for employee in employees
            if by_employee.get(employee.employee_id)
        ]

    def official_report(
        self,
        employee_id: str,
        start: date,
        end: date,
        *,
        work_centers: Optional[Sequence[str]] = None,
        company: Optional[Company] = None,
    ) -> OfficialReport:
        self._check_range(start, end)
        employee = self._employees.get_employee(employee_id)
        if not employee:
            raise ValidationError("Employee does not exist")
        if work_centers is not None and not set(employee.work_centers) & set(work_centers):
            raise AuthorizationError("Employee is not in your work centers")

        events = list(
            self._entries.list_for_employee(
                employee_id, start=start_of_day(start, self._tz), end=end_of_day(end, self._tz)
            )
        )
        return OfficialReport(
            employee=employee,
            start=start,
            end=end,
            days=build_official_rows(events, start, end, self._tz),
            company=company,
        )

    def alarm_report(
        self,
        work_centers: Sequence[str],
        start: date,
        end: date,
        *,
        hours_limit: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> list[AlarmReportRow]:
        self._check_range(start, end)
        limit = self._hours_limit if hours_limit is None else float(hours_limit)
        if limit < 0:
            raise ValidationError("Hours limit must not be negative")

        now = now or now_utc()
        window_start = start_of_day(start, self._tz)
        window_end = end_of_day(end, self._tz)
        employees, by_employee = self._snapshot(work_centers, window_start, window_end)

        rows: list[AlarmReportRow] = []
        for employee in employees:
            total_ms = range_total(by_employee.get(employee.employee_id, []), window_start, window_end, now)
            total_hours = ms_to_hours(total_ms)
            if total_hours > limit:
                rows.append(
                    AlarmReportRow(employee=employee, start=start, end=end, total_hours=total_hours, hours_limit=limit)
                )
        return rows

    def dashboard(self, work_centers: Sequence[str], *, now: Optional[datetime] = None) -> Dashboard:
        """Live view: today's and month-to-date worked time per employee, open sessions accruing."""
        now = now or now_utc()
        today = local_date(now, self._tz)
        window_start = start_of_day(today.replace(day=1), self._tz)
        day_start = start_of_day(today, self._tz)
        employees, by_employee = self._snapshot(work_centers, window_start, now)

        rows: list[DashboardRow] = []
        for employee in employees:
            # A session opened before the month started is still live on the dashboard.
            previous = self._entries.get_latest_for_employee(employee.employee_id, before=window_start)
            events = carry_in(previous, window_start) + list(by_employee.get(employee.employee_id, []))

            before_today = latest_event([e for e in events if e.timestamp < day_start])
            today_events = carry_in(before_today, day_start) + [e for e in events if e.timestamp >= day_start]

            rows.append(
                DashboardRow(
                    employee=employee,
                    today_ms=daily_total(today_events, today, self._tz, now),
                    total_ms=range_total(events, window_start, now, now),
                    is_open_session=is_open_session(events),
                )
            )
        return Dashboard(rows=rows)

    def generate(
        self,
        report_type: ReportType,
        *,
        work_centers: Sequence[str],
        start: Optional[date] = None,
        end: Optional[date] = None,
        year: Optional[int] = None,
        employee_id: Optional[str] = None,
        hours_limit: Optional[float] = None,
        company: Optional[Company] = None,
        now: Optional[datetime] = None,
    ) -> list[dict]:
        """Dispatch by report type and return JSON-ready rows."""

        if report_type == ReportType.ANNUAL:
            year = year or local_date(now or now_utc(), self._tz).year
            return [r.to_dict() for r in self.annual_report(work_centers, year)]

        if start is None or end is None:
            raise ValidationError("Missing start/end parameters")

        if report_type == ReportType.DAILY:
            return [r.to_dict() for r in self.daily_report(work_centers, start, end)]
        if report_type == ReportType.OFFICIAL:
            if not employee_id:
                raise ValidationError("Select an employee")
            report = self.official_report(employee_id, start, end, work_centers=work_centers, company=company)
            return [report.to_dict(self._tz)]
        if report_type == ReportType.ALARMS:
            rows = self.alarm_report(work_centers, start, end, hours_limit=hours_limit, now=now)
            return [r.to_dict() for r in rows]

        raise ValidationError(f"Unknown report type: {report_type!r}")

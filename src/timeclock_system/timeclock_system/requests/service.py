from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..common.datetime_utils import get_zone, now_utc
from ..core.enums import EntryType, PlannerType, RequestStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..time_entries.repository import TimeEntryRepository
from .repository import RequestRepository

logger = logging.getLogger(__name__)


class RequestService:
    """Use case: correction and planner requests.

    Employees file requests; supervisors of the request's work center decide
    them. Approving a time request is the only way a past clock event is
    added.
    """

    def __init__(self, requests: RequestRepository, entries: TimeEntryRepository, employees: EmployeeRepository):
        self._requests = requests
        self._entries = entries
        self._employees = employees

    @staticmethod
    def _parse_time(value: str) -> Optional[time]:
        v = (value or "").strip()
        if not v:
            return None
        try:
            return datetime.strptime(v, "%H:%M").time()
        except ValueError:
            raise ValidationError("Invalid time (HH:MM)")

    def _combine(self, employee: Employee, day: date, value: str) -> datetime:
        """Local date + optional HH:MM in the employee's timezone -> aware datetime."""
        t = self._parse_time(value) or time.min
        return datetime.combine(day, t, tzinfo=get_zone(employee.timezone))

    def _require_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_employee(employee_id)
        if not employee or not employee.is_active:
            raise ValidationError("Employee does not exist")
        return employee

    def create_time_request(
        self,
        *,
        current_role: Role,
        employee_id: str,
        entry_type: str,
        work_date: date,
        entry_time: str,
        work_center: str,
        comment: str = "",
        now: Optional[datetime] = None,
    ) -> int:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can file time requests")

        employee = self._require_employee(employee_id)
        try:
            kind = EntryType(entry_type)
        except ValueError:
            raise ValidationError("Invalid entry type")

        if not work_center:
            raise ValidationError("Please fill in all required fields")
        if work_center not in employee.work_centers:
            raise ValidationError("Work center is not assigned to you")

        requested_at = self._combine(employee, work_date, entry_time)
        if requested_at > (now or now_utc()):
            raise ValidationError("Requested time is in the future")

        return self._requests.create_time_request(
            employee_id=employee.employee_id,
            entry_type=kind,
            requested_at=requested_at,
            work_center=work_center,
            comment=(comment or "").strip() or None,
        )

    def create_planner_request(
        self,
        *,
        current_role: Role,
        employee_id: str,
        planner_type: str,
        start_date: date,
        end_date: date,
        start_time: str = "",
        end_time: str = "",
        comment: str = "",
    ) -> int:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can file planner requests")

        employee = self._require_employee(employee_id)
        try:
            kind = PlannerType(planner_type)
        except ValueError:
            raise ValidationError("Invalid planner type")

        start_at = self._combine(employee, start_date, start_time)
        end_at = self._combine(employee, end_date, end_time)
        if end_at < start_at:
            raise ValidationError("End must not be before start")

        return self._requests.create_planner_request(
            employee_id=employee.employee_id,
            planner_type=kind,
            start_at=start_at,
            end_at=end_at,
            comment=(comment or "").strip() or None,
        )

    def _require_supervisor(self, current_role: Role, supervisor_id: str):
        if current_role != Role.SUPERVISOR:
            raise AuthorizationError("You do not have permission")
        supervisor = self._employees.get_supervisor(supervisor_id)
        if not supervisor or not supervisor.is_active:
            raise AuthorizationError("You do not have permission")
        return supervisor

    def approve_time_request(self, *, current_role: Role, supervisor_id: str, request_id: int) -> int:
        supervisor = self._require_supervisor(current_role, supervisor_id)

        req = self._requests.get_time_request(request_id=int(request_id))
        if not req:
            raise ValidationError("Request does not exist")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Request has already been decided")
        if req.work_center not in supervisor.work_centers:
            raise AuthorizationError("Request is not in your work centers")

        # Only the approver whose pending->approved update wins inserts the clock event.
        decided = self._requests.decide_time_request(
            request_id=req.request_id,
            status=RequestStatus.APPROVED,
            decided_by=supervisor.supervisor_id,
        )
        if not decided:
            raise ValidationError("Request has already been decided")

        entry_id = self._entries.create_entry(
            employee_id=req.employee_id,
            kind=req.entry_type,
            timestamp=req.requested_at,
            work_center=req.work_center,
        )

        logger.info("time request %s approved by %s (entry %s)", req.request_id, supervisor.supervisor_id, entry_id)
        return entry_id

    def reject_time_request(self, *, current_role: Role, supervisor_id: str, request_id: int) -> None:
        supervisor = self._require_supervisor(current_role, supervisor_id)

        req = self._requests.get_time_request(request_id=int(request_id))
        if not req:
            raise ValidationError("Request does not exist")
        if req.work_center not in supervisor.work_centers:
            raise AuthorizationError("Request is not in your work centers")

        if not self._requests.decide_time_request(
            request_id=req.request_id,
            status=RequestStatus.REJECTED,
            decided_by=supervisor.supervisor_id,
        ):
            raise ValidationError("Request has already been decided")

    def decide_planner_request(
        self,
        *,
        current_role: Role,
        supervisor_id: str,
        request_id: int,
        approve: bool,
    ) -> None:
        supervisor = self._require_supervisor(current_role, supervisor_id)

        req = self._requests.get_planner_request(request_id=int(request_id))
        if not req:
            raise ValidationError("Request does not exist")

        employee = self._employees.get_employee(req.employee_id)
        if not employee or not set(employee.work_centers) & set(supervisor.work_centers):
            raise AuthorizationError("Request is not in your work centers")

        if not self._requests.decide_planner_request(
            request_id=req.request_id,
            status=RequestStatus.APPROVED if approve else RequestStatus.REJECTED,
            decided_by=supervisor.supervisor_id,
        ):
            raise ValidationError("Request has already been decided")

    def list_my_requests(self, *, employee_id: str) -> dict:
        return {
            "time_requests": list(self._requests.list_time_requests(employee_id=employee_id)),
            "planner_requests": list(self._requests.list_planner_requests(employee_id=employee_id)),
        }

    def list_for_supervisor(
        self,
        *,
        work_centers: Sequence[str],
        status: Optional[RequestStatus] = None,
    ) -> list[dict]:
        rows = list(self._requests.list_time_requests(work_centers=work_centers, status=status))
        rows += list(self._requests.list_planner_requests(work_centers=work_centers, status=status))
        rows.sort(key=lambda r: r.get("created_at") or "", reverse=True)
        return rows

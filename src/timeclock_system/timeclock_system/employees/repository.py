from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, Supervisor


class EmployeeRepository(Protocol):
    """Repository interface for employee and supervisor profiles."""

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_employee_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_supervisor(self, supervisor_id: str) -> Optional[Supervisor]:
        raise NotImplementedError

    def get_supervisor_by_email(self, email: str) -> Optional[Supervisor]:
        raise NotImplementedError

    def list_employees_for_work_centers(self, work_centers: Sequence[str]) -> Sequence[Employee]:
        """Active employees assigned to at least one of ``work_centers``."""

        raise NotImplementedError

    def update_employee_pin(self, employee_id: str, pin_hash: str) -> bool:
        """Replace the stored PIN hash of an active employee. False if nothing was updated."""

        raise NotImplementedError

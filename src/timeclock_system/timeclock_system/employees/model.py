from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_TIMEZONE


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee profile.

    Plain data object (no DB access code).
    """

    employee_id: str
    email: str
    fiscal_name: str
    pin_hash: str
    work_centers: tuple[str, ...] = ()
    document_number: Optional[str] = None
    timezone: str = DEFAULT_TIMEZONE
    is_active: bool = True

    def summary(self) -> dict:
        return {
            "id": self.employee_id,
            "fiscal_name": self.fiscal_name,
            "email": self.email,
            "work_centers": list(self.work_centers),
            "document_number": self.document_number or "",
        }


@dataclass(frozen=True)
class Company:
    fiscal_name: str
    nif: str


@dataclass(frozen=True)
class Supervisor:
    supervisor_id: str
    email: str
    fiscal_name: str
    pin_hash: str
    work_centers: tuple[str, ...] = ()
    company: Optional[Company] = None
    is_active: bool = True

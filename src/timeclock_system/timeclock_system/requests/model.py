from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EntryType, PlannerType, RequestStatus


@dataclass(frozen=True)
class TimeRequest:
    """Employee asks a supervisor to add a clock event they missed."""

    request_id: int
    employee_id: str
    entry_type: EntryType
    requested_at: datetime
    work_center: str
    comment: Optional[str]
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None


@dataclass(frozen=True)
class PlannerRequest:
    """Planned absence (vacation, sick leave, ...)."""

    request_id: int
    employee_id: str
    planner_type: PlannerType
    start_at: datetime
    end_at: datetime
    comment: Optional[str]
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EntryType, PlannerType, RequestStatus
from .model import PlannerRequest, TimeRequest


class RequestRepository(Protocol):
    # Time requests
    def create_time_request(
        self,
        *,
        employee_id: str,
        entry_type: EntryType,
        requested_at: datetime,
        work_center: str,
        comment: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_time_request(self, *, request_id: int) -> Optional[TimeRequest]:
        raise NotImplementedError

    def list_time_requests(
        self,
        *,
        employee_id: Optional[str] = None,
        work_centers: Optional[Sequence[str]] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        """Return UI rows (joined with employee)."""

        raise NotImplementedError

    def decide_time_request(self, *, request_id: int, status: RequestStatus, decided_by: str) -> bool:
        raise NotImplementedError

    # Planner requests
    def create_planner_request(
        self,
        *,
        employee_id: str,
        planner_type: PlannerType,
        start_at: datetime,
        end_at: datetime,
        comment: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_planner_request(self, *, request_id: int) -> Optional[PlannerRequest]:
        raise NotImplementedError

    def list_planner_requests(
        self,
        *,
        employee_id: Optional[str] = None,
        work_centers: Optional[Sequence[str]] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        raise NotImplementedError

    def decide_planner_request(self, *, request_id: int, status: RequestStatus, decided_by: str) -> bool:
        raise NotImplementedError

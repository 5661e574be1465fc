from __future__ import annotations

import json
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EntryType, PlannerType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, in_clause, to_db_datetime
from .model import PlannerRequest, TimeRequest
from .repository import RequestRepository


def _fmt(value: Optional[datetime]) -> Optional[str]:
    value = from_db_datetime(value)
    return value.isoformat() if value else None


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Time requests --------
    def create_time_request(
        self,
        *,
        employee_id: str,
        entry_type: EntryType,
        requested_at: datetime,
        work_center: str,
        comment: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_requests(employee_id, entry_type, requested_at, work_center, comment, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    str(employee_id),
                    entry_type.value,
                    to_db_datetime(requested_at),
                    work_center,
                    comment,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_time_request(self, *, request_id: int) -> Optional[TimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, entry_type, requested_at, work_center, comment,
                       status, created_at, decided_by, decided_at
                FROM time_requests
                WHERE id=%s
                """,
                (int(request_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return TimeRequest(
                request_id=int(r["id"]),
                employee_id=str(r["employee_id"]),
                entry_type=EntryType(r["entry_type"]),
                requested_at=from_db_datetime(r["requested_at"]),
                work_center=r["work_center"],
                comment=r.get("comment"),
                status=RequestStatus(r["status"]),
                created_at=from_db_datetime(r["created_at"]),
                decided_by=r.get("decided_by"),
                decided_at=from_db_datetime(r.get("decided_at")),
            )

    def list_time_requests(
        self,
        *,
        employee_id: Optional[str] = None,
        work_centers: Optional[Sequence[str]] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("r.employee_id=%s")
            params.append(str(employee_id))
        if work_centers is not None:
            if not work_centers:
                return []
            clauses.append(f"r.work_center IN ({in_clause(work_centers)})")
            params.extend(str(c) for c in work_centers)
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.id, r.employee_id, e.fiscal_name, e.email,
                       r.entry_type, r.requested_at, r.work_center, r.comment,
                       r.status, r.created_at, r.decided_by, r.decided_at
                FROM time_requests r
                JOIN employee_profiles e ON e.id = r.employee_id
                WHERE {where}
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [
                {
                    "request_id": int(r["id"]),
                    "type": "time",
                    "employee_id": str(r["employee_id"]),
                    "fiscal_name": r["fiscal_name"],
                    "email": r["email"],
                    "entry_type": r["entry_type"],
                    "datetime": _fmt(r["requested_at"]),
                    "work_center": r["work_center"],
                    "comment": r.get("comment") or "",
                    "status": r["status"],
                    "created_at": _fmt(r["created_at"]),
                    "decided_by": r.get("decided_by"),
                    "decided_at": _fmt(r.get("decided_at")),
                }
                for r in fetchall(cur)
            ]

    def decide_time_request(self, *, request_id: int, status: RequestStatus, decided_by: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_requests
                SET status=%s, decided_by=%s, decided_at=UTC_TIMESTAMP()
                WHERE id=%s AND status=%s
                """,
                (status.value, str(decided_by), int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    # -------- Planner requests --------
    def create_planner_request(
        self,
        *,
        employee_id: str,
        planner_type: PlannerType,
        start_at: datetime,
        end_at: datetime,
        comment: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO planner_requests(employee_id, planner_type, start_at, end_at, comment, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    str(employee_id),
                    planner_type.value,
                    to_db_datetime(start_at),
                    to_db_datetime(end_at),
                    comment,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_planner_request(self, *, request_id: int) -> Optional[PlannerRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, planner_type, start_at, end_at, comment,
                       status, created_at, decided_by, decided_at
                FROM planner_requests
                WHERE id=%s
                """,
                (int(request_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return PlannerRequest(
                request_id=int(r["id"]),
                employee_id=str(r["employee_id"]),
                planner_type=PlannerType(r["planner_type"]),
                start_at=from_db_datetime(r["start_at"]),
                end_at=from_db_datetime(r["end_at"]),
                comment=r.get("comment"),
                status=RequestStatus(r["status"]),
                created_at=from_db_datetime(r["created_at"]),
                decided_by=r.get("decided_by"),
                decided_at=from_db_datetime(r.get("decided_at")),
            )

    def list_planner_requests(
        self,
        *,
        employee_id: Optional[str] = None,
        work_centers: Optional[Sequence[str]] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("r.employee_id=%s")
            params.append(str(employee_id))
        if work_centers is not None:
            if not work_centers:
                return []
            clauses.append("JSON_OVERLAPS(e.work_centers, %s)")
            params.append(json.dumps([str(c) for c in work_centers]))
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.id, r.employee_id, e.fiscal_name, e.email,
                       r.planner_type, r.start_at, r.end_at, r.comment,
                       r.status, r.created_at, r.decided_by, r.decided_at
                FROM planner_requests r
                JOIN employee_profiles e ON e.id = r.employee_id
                WHERE {where}
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [
                {
                    "request_id": int(r["id"]),
                    "type": "planner",
                    "employee_id": str(r["employee_id"]),
                    "fiscal_name": r["fiscal_name"],
                    "email": r["email"],
                    "planner_type": r["planner_type"],
                    "start_date": _fmt(r["start_at"]),
                    "end_date": _fmt(r["end_at"]),
                    "comment": r.get("comment") or "",
                    "status": r["status"],
                    "created_at": _fmt(r["created_at"]),
                    "decided_by": r.get("decided_by"),
                    "decided_at": _fmt(r.get("decided_at")),
                }
                for r in fetchall(cur)
            ]

    def decide_planner_request(self, *, request_id: int, status: RequestStatus, decided_by: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE planner_requests
                SET status=%s, decided_by=%s, decided_at=UTC_TIMESTAMP()
                WHERE id=%s AND status=%s
                """,
                (status.value, str(decided_by), int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, in_clause, to_db_datetime
from .model import TimeEvent
from .repository import TimeEntryRepository

_COLUMNS = "id, employee_id, entry_type, `timestamp`, work_center, latitude, longitude"


def _row_to_event(r: dict) -> TimeEvent:
    return TimeEvent(
        employee_id=str(r["employee_id"]),
        timestamp=from_db_datetime(r["timestamp"]),
        kind=EntryType(r["entry_type"]),
        work_center=r.get("work_center"),
        entry_id=int(r["id"]),
        latitude=r.get("latitude"),
        longitude=r.get("longitude"),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employees(
        self,
        employee_ids: Sequence[str],
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeEvent]:
        ids = [str(i) for i in employee_ids]
        if not ids:
            return []

        clauses = [f"employee_id IN ({in_clause(ids)})"]
        params: list[object] = list(ids)

        if start is not None:
            clauses.append("`timestamp` >= %s")
            params.append(to_db_datetime(start))
        if end is not None:
            clauses.append("`timestamp` <= %s")
            params.append(to_db_datetime(end))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE {where}
                ORDER BY `timestamp` ASC, id ASC
                """,
                tuple(params),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def list_for_employee(
        self,
        employee_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeEvent]:
        return self.list_for_employees([employee_id], start=start, end=end)

    def get_latest_for_employee(self, employee_id: str, *, before: Optional[datetime] = None) -> Optional[TimeEvent]:
        where = "employee_id=%s"
        params: list[object] = [str(employee_id)]
        if before is not None:
            where += " AND `timestamp` < %s"
            params.append(to_db_datetime(before))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE {where}
                ORDER BY `timestamp` DESC, id DESC
                LIMIT 1
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return _row_to_event(r) if r else None

    def create_entry(
        self,
        *,
        employee_id: str,
        kind: EntryType,
        timestamp: datetime,
        work_center: Optional[str],
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entries(employee_id, entry_type, `timestamp`, work_center, latitude, longitude)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (str(employee_id), kind.value, to_db_datetime(timestamp), work_center, latitude, longitude),
            )
            return int(cur.lastrowid)

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EntryType
from .model import TimeEvent


class TimeEntryRepository(Protocol):
    """Repository interface for clock events.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def list_for_employees(
        self,
        employee_ids: Sequence[str],
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeEvent]:
        """Events of the given employees, oldest first, ``start <= timestamp <= end``."""

        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeEvent]:
        raise NotImplementedError

    def get_latest_for_employee(self, employee_id: str, *, before: Optional[datetime] = None) -> Optional[TimeEvent]:
        """Most recent event, or the most recent one strictly before ``before``."""

        raise NotImplementedError

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
        raise NotImplementedError

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Optional

from ..common.datetime_utils import end_of_day, format_duration, get_zone, now_utc, start_of_day
from ..core.enums import ClockState, EntryType
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..worktime.ordering import clock_state
from ..worktime.windows import range_total
from .model import ClockStatus, TimeEvent
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)

# Which states each action may be taken from.
_ALLOWED_FROM: dict[EntryType, tuple[ClockState, ...]] = {
    EntryType.CLOCK_IN: (ClockState.INITIAL,),
    EntryType.BREAK_START: (ClockState.WORKING,),
    EntryType.BREAK_END: (ClockState.PAUSED,),
    EntryType.CLOCK_OUT: (ClockState.WORKING, ClockState.PAUSED),
}

_REJECT_MESSAGES: dict[EntryType, str] = {
    EntryType.CLOCK_IN: "You are already clocked in",
    EntryType.BREAK_START: "You can only start a break while working",
    EntryType.BREAK_END: "You are not on a break",
    EntryType.CLOCK_OUT: "There is no active clock-in",
}


@dataclass(frozen=True)
class HistoryView:
    events: list[TimeEvent]
    total_ms: int
    start: date
    end: date

    def to_dict(self, tz: tzinfo) -> dict:
        return {
            "start": self.start.strftime("%Y-%m-%d"),
            "end": self.end.strftime("%Y-%m-%d"),
            "total_ms": self.total_ms,
            "total": format_duration(self.total_ms),
            "entries": [
                dict(e.to_dict(), local_time=e.timestamp.astimezone(tz).strftime("%Y-%m-%d %H:%M"))
                for e in self.events
            ],
        }


class ClockService:
    """Use case: employee clock actions and personal history."""

    def __init__(self, entries: TimeEntryRepository, employees: EmployeeRepository):
        self._entries = entries
        self._employees = employees

    def _require_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_employee(employee_id)
        if not employee or not employee.is_active:
            raise ValidationError("Employee does not exist")
        return employee

    def current_state(self, employee_id: str) -> ClockStatus:
        latest = self._entries.get_latest_for_employee(employee_id)
        state = clock_state(latest)
        if state == ClockState.INITIAL:
            return ClockStatus(state=state)
        return ClockStatus(state=state, work_center=latest.work_center, since=latest.timestamp)

    def _record(
        self,
        employee_id: str,
        kind: EntryType,
        *,
        work_center: Optional[str],
        now: Optional[datetime],
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> TimeEvent:
        status = self.current_state(employee_id)
        if status.state not in _ALLOWED_FROM[kind]:
            raise ValidationError(_REJECT_MESSAGES[kind])

        now = now or now_utc()
        entry_id = self._entries.create_entry(
            employee_id=employee_id,
            kind=kind,
            timestamp=now,
            work_center=work_center,
            latitude=latitude,
            longitude=longitude,
        )
        logger.info("employee %s %s at %s (%s)", employee_id, kind.value, now.isoformat(), work_center or "-")
        return TimeEvent(
            employee_id=employee_id,
            timestamp=now,
            kind=kind,
            work_center=work_center,
            entry_id=entry_id,
            latitude=latitude,
            longitude=longitude,
        )

    def clock_in(
        self,
        employee_id: str,
        *,
        work_center: Optional[str] = None,
        now: Optional[datetime] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> TimeEvent:
        employee = self._require_employee(employee_id)
        if not employee.work_centers:
            raise ValidationError("You have no work centers assigned")

        if work_center is None:
            if len(employee.work_centers) > 1:
                raise ValidationError("Select a work center")
            work_center = employee.work_centers[0]
        elif work_center not in employee.work_centers:
            raise ValidationError("Work center is not assigned to you")

        return self._record(
            employee_id,
            EntryType.CLOCK_IN,
            work_center=work_center,
            now=now,
            latitude=latitude,
            longitude=longitude,
        )

    def _continue_session(
        self,
        employee_id: str,
        kind: EntryType,
        now: Optional[datetime],
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> TimeEvent:
        self._require_employee(employee_id)
        # Break and clock-out events inherit the open session's work center.
        work_center = self.current_state(employee_id).work_center
        return self._record(
            employee_id,
            kind,
            work_center=work_center,
            now=now,
            latitude=latitude,
            longitude=longitude,
        )

    def break_start(
        self,
        employee_id: str,
        *,
        now: Optional[datetime] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> TimeEvent:
        return self._continue_session(employee_id, EntryType.BREAK_START, now, latitude, longitude)

    def break_end(
        self,
        employee_id: str,
        *,
        now: Optional[datetime] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> TimeEvent:
        return self._continue_session(employee_id, EntryType.BREAK_END, now, latitude, longitude)

    def clock_out(
        self,
        employee_id: str,
        *,
        now: Optional[datetime] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> TimeEvent:
        return self._continue_session(employee_id, EntryType.CLOCK_OUT, now, latitude, longitude)

    def history(self, employee_id: str, *, start: date, end: date, now: Optional[datetime] = None) -> HistoryView:
        if end < start:
            raise ValidationError("End date must not be before start date")

        employee = self._require_employee(employee_id)
        tz = get_zone(employee.timezone)
        window_start = start_of_day(start, tz)
        window_end = end_of_day(end, tz)

        events = list(self._entries.list_for_employee(employee_id, start=window_start, end=window_end))
        total_ms = range_total(events, window_start, window_end, now or now_utc())
        newest_first = sorted(events, key=lambda e: e.timestamp, reverse=True)
        return HistoryView(events=newest_first, total_ms=total_ms, start=start, end=end)

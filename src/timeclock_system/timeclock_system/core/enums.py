from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role stored in the session, used for access control."""

    EMPLOYEE = "employee"
    SUPERVISOR = "supervisor"


class EntryType(str, Enum):
    """Kind of clock event. Closed set, stored as-is in ``time_entries.entry_type``."""

    CLOCK_IN = "clock_in"
    BREAK_START = "break_start"
    BREAK_END = "break_end"
    CLOCK_OUT = "clock_out"


class ClockState(str, Enum):
    """Where an employee stands, derived from their latest clock event."""

    INITIAL = "initial"
    WORKING = "working"
    PAUSED = "paused"


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PlannerType(str, Enum):
    VACATION = "vacation"
    SICK_LEAVE = "sick_leave"
    PERSONAL = "personal"
    OTHER = "other"


class ReportType(str, Enum):
    DAILY = "daily"
    ANNUAL = "annual"
    OFFICIAL = "official"
    ALARMS = "alarms"

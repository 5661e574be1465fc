from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_timestamp
from ..core.enums import ClockState, EntryType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class TimeEvent:
    """Domain entity: one clock action performed by an employee.

    Events are facts. Nothing in the aggregation code creates, mutates or
    deletes them; new ones only come from the clock screen or from an
    approved correction request.
    """

    employee_id: str
    timestamp: datetime
    kind: EntryType
    work_center: Optional[str] = None
    entry_id: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "TimeEvent":
        """Build an event from a deserialized backend row.

        Expects ``employee_id``, ``timestamp`` (ISO-8601 or datetime),
        ``entry_type`` and optionally ``work_center`` / ``id``.
        """
        try:
            kind = EntryType(record["entry_type"])
        except ValueError:
            raise ValidationError(f"Unknown entry type: {record['entry_type']!r}")

        entry_id = record.get("id", record.get("entry_id"))
        return cls(
            employee_id=str(record["employee_id"]),
            timestamp=parse_timestamp(record["timestamp"]),
            kind=kind,
            work_center=record.get("work_center") or None,
            entry_id=int(entry_id) if entry_id is not None else None,
            latitude=record.get("latitude"),
            longitude=record.get("longitude"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "employee_id": self.employee_id,
            "timestamp": self.timestamp.isoformat(),
            "entry_type": self.kind.value,
            "work_center": self.work_center,
        }


@dataclass(frozen=True)
class ClockStatus:
    """Read-model for the clock screen."""

    state: ClockState
    work_center: Optional[str] = None
    since: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "work_center": self.work_center,
            "since": self.since.isoformat() if self.since else None,
        }

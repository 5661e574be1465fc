from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import ClockState, EntryType
from ..time_entries.model import TimeEvent


def sort_events(events: Iterable[TimeEvent]) -> list[TimeEvent]:
    """Chronological copy of ``events``; ties keep their original order."""
    return sorted(events, key=lambda e: e.timestamp)


def group_by_employee(events: Iterable[TimeEvent]) -> dict[str, list[TimeEvent]]:
    groups: dict[str, list[TimeEvent]] = {}
    for event in events:
        groups.setdefault(event.employee_id, []).append(event)
    return groups


def latest_event(events: Sequence[TimeEvent]) -> Optional[TimeEvent]:
    ordered = sort_events(events)
    return ordered[-1] if ordered else None


def is_open_session(events: Sequence[TimeEvent]) -> bool:
    last = latest_event(events)
    return last is not None and last.kind != EntryType.CLOCK_OUT


def clock_state(latest: Optional[TimeEvent]) -> ClockState:
    if latest is None:
        return ClockState.INITIAL
    if latest.kind in (EntryType.CLOCK_IN, EntryType.BREAK_END):
        return ClockState.WORKING
    if latest.kind == EntryType.BREAK_START:
        return ClockState.PAUSED
    return ClockState.INITIAL

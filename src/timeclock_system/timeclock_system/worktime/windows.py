"""Windowing and bucketing wrappers around the reducer.

Every call takes its timezone and "now" explicitly; nothing here reads the
ambient clock or locale.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, tzinfo
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import local_date, ms_to_hours
from ..core.enums import EntryType
from ..time_entries.model import TimeEvent
from .reducer import reduce_events


def events_on_day(events: Iterable[TimeEvent], day: date, tz: tzinfo) -> list[TimeEvent]:
    return [e for e in events if local_date(e.timestamp, tz) == day]


def events_in_range(events: Iterable[TimeEvent], start: datetime, end: datetime) -> list[TimeEvent]:
    return [e for e in events if start <= e.timestamp <= end]


def daily_total(
    events: Iterable[TimeEvent],
    day: date,
    tz: tzinfo,
    reference_now: Optional[datetime] = None,
) -> int:
    return reduce_events(events_on_day(events, day, tz), reference_now)


def carry_in(previous: Optional[TimeEvent], at: datetime) -> list[TimeEvent]:
    """Session state entering a window that starts at ``at``.

    ``previous`` is the employee's last event before the window. A session
    still working at ``at`` becomes a clock_in at ``at``, a paused one a
    break_start at ``at``; a closed or missing one carries nothing. Only the
    part of the session inside the window is then counted.
    """
    if previous is None or previous.kind == EntryType.CLOCK_OUT:
        return []
    kind = EntryType.BREAK_START if previous.kind == EntryType.BREAK_START else EntryType.CLOCK_IN
    return [replace(previous, timestamp=at, kind=kind, entry_id=None)]


def range_reference(end: datetime, now: datetime) -> datetime:
    """Open sessions accrue up to ``now`` for live windows, up to ``end`` for past ones."""
    return now if end >= now else end


def range_total(events: Iterable[TimeEvent], start: datetime, end: datetime, now: datetime) -> int:
    return reduce_events(events_in_range(events, start, end), range_reference(end, now))


def partition_by_month(events: Iterable[TimeEvent], year: int, tz: tzinfo) -> list[list[TimeEvent]]:
    months: list[list[TimeEvent]] = [[] for _ in range(12)]
    for event in events:
        local = event.timestamp.astimezone(tz)
        if local.year == year:
            months[local.month - 1].append(event)
    return months


def monthly_buckets(events: Iterable[TimeEvent], year: int, tz: tzinfo) -> list[float]:
    """Worked hours per calendar month of ``year``.

    Each month is reduced on its own and without extrapolation, so a session
    opened in one month and closed in the next counts in neither.
    """
    return [ms_to_hours(reduce_events(month)) for month in partition_by_month(events, year, tz)]


def per_day_totals(events: Sequence[TimeEvent], tz: tzinfo) -> dict[date, int]:
    """Worked ms for every local day that has at least one event (no extrapolation)."""
    days: dict[date, list[TimeEvent]] = {}
    for event in events:
        days.setdefault(local_date(event.timestamp, tz), []).append(event)
    return {day: reduce_events(day_events) for day, day_events in sorted(days.items())}

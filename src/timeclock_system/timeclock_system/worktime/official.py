"""Per-day rows for the official working-time record.

Exactly one entry/exit pair per day: the first clock-in and the last
clock-out of the day, minus the paired breaks. Deliberately independent of
the running-state reducer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Optional, Sequence

from ..common.datetime_utils import format_hm, iter_days, ms_to_hours, to_millis
from ..core.enums import EntryType
from ..time_entries.model import TimeEvent
from .ordering import sort_events
from .windows import events_on_day


@dataclass(frozen=True)
class OfficialDayRow:
    day: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    break_ms: int
    total_hours: float

    def to_dict(self, tz: tzinfo) -> dict:
        return {
            "date": self.day.strftime("%Y-%m-%d"),
            "clock_in": self.clock_in.astimezone(tz).strftime("%H:%M") if self.clock_in else "",
            "clock_out": self.clock_out.astimezone(tz).strftime("%H:%M") if self.clock_out else "",
            "break_duration": format_hm(self.break_ms) if self.break_ms > 0 else "",
            "total_hours": self.total_hours,
        }


def paired_break_ms(events: Sequence[TimeEvent]) -> int:
    """Sum of break_start -> break_end pairs; a trailing break_start adds nothing."""
    total = 0
    break_start: Optional[datetime] = None
    for event in events:
        if event.kind == EntryType.BREAK_START:
            break_start = event.timestamp
        elif event.kind == EntryType.BREAK_END and break_start is not None:
            total += to_millis(event.timestamp - break_start)
            break_start = None
    return total


def build_day_row(events: Sequence[TimeEvent], day: date) -> OfficialDayRow:
    ordered = sort_events(events)
    clock_ins = [e.timestamp for e in ordered if e.kind == EntryType.CLOCK_IN]
    clock_outs = [e.timestamp for e in ordered if e.kind == EntryType.CLOCK_OUT]
    clock_in = clock_ins[0] if clock_ins else None
    clock_out = clock_outs[-1] if clock_outs else None
    break_ms = paired_break_ms(ordered)

    total_hours = 0.0
    if clock_in is not None and clock_out is not None:
        worked_ms = to_millis(clock_out - clock_in) - break_ms
        total_hours = ms_to_hours(max(worked_ms, 0))

    return OfficialDayRow(
        day=day,
        clock_in=clock_in,
        clock_out=clock_out,
        break_ms=break_ms,
        total_hours=total_hours,
    )


def build_official_rows(events: Sequence[TimeEvent], start: date, end: date, tz: tzinfo) -> list[OfficialDayRow]:
    return [build_day_row(events_on_day(events, day, tz), day) for day in iter_days(start, end)]

"""Work-time reducer: clock events -> worked milliseconds.

One left-to-right fold over the time-sorted events. The running state is an
immutable ``ReducerState`` threaded through ``step``:

    clock_in     open span starts here (an already open span is dropped)
    break_start  close the open span into the total, mark on break
    break_end    open span restarts here (an already open span is dropped)
    clock_out    close the open span into the total

A span still open at the end accrues up to ``reference_now`` when one is
given. Malformed sequences never raise; they only under- or over-count.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from functools import reduce
from typing import Iterable, Optional

from ..common.datetime_utils import to_millis
from ..core.enums import EntryType
from ..time_entries.model import TimeEvent
from .ordering import sort_events


@dataclass(frozen=True)
class ReducerState:
    open_clock_in: Optional[datetime] = None
    on_break: bool = False
    total_ms: int = 0

    def _close(self, at: datetime) -> "ReducerState":
        if self.open_clock_in is None:
            return self
        worked = max(to_millis(at - self.open_clock_in), 0)
        return replace(self, open_clock_in=None, total_ms=self.total_ms + worked)

    def step(self, event: TimeEvent) -> "ReducerState":
        if event.kind == EntryType.CLOCK_IN:
            return replace(self, open_clock_in=event.timestamp)
        if event.kind == EntryType.BREAK_START:
            return replace(self._close(event.timestamp), on_break=True)
        if event.kind == EntryType.BREAK_END:
            return replace(self, open_clock_in=event.timestamp, on_break=False)
        # EntryType is closed, so what remains is CLOCK_OUT.
        return self._close(event.timestamp)

    def finish(self, reference_now: Optional[datetime]) -> int:
        if self.open_clock_in is None or reference_now is None:
            return self.total_ms
        return self._close(reference_now).total_ms


def fold_events(events: Iterable[TimeEvent]) -> ReducerState:
    return reduce(lambda state, event: state.step(event), sort_events(events), ReducerState())


def reduce_events(events: Iterable[TimeEvent], reference_now: Optional[datetime] = None) -> int:
    """Total worked milliseconds for ``events``.

    ``reference_now=None`` leaves an open session uncounted, which is what
    closed historical windows want.
    """
    return fold_events(events).finish(reference_now)

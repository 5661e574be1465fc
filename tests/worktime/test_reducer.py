from __future__ import annotations

from datetime import datetime, timedelta, timezone

from src.timeclock_system.timeclock_system.core.enums import EntryType
from src.timeclock_system.timeclock_system.time_entries.model import TimeEvent
from src.timeclock_system.timeclock_system.worktime.reducer import ReducerState, fold_events, reduce_events

HOUR_MS = 3_600_000


def _at(hh: int, mm: int = 0, day: int = 18) -> datetime:
    return datetime(2026, 3, day, hh, mm, tzinfo=timezone.utc)


def _ev(kind: EntryType, ts: datetime, employee_id: str = "emp-1") -> TimeEvent:
    return TimeEvent(employee_id=employee_id, timestamp=ts, kind=kind)


def _workday():
    return [
        _ev(EntryType.CLOCK_IN, _at(9)),
        _ev(EntryType.BREAK_START, _at(13)),
        _ev(EntryType.BREAK_END, _at(14)),
        _ev(EntryType.CLOCK_OUT, _at(18)),
    ]


def test_empty_is_zero():
    assert reduce_events([]) == 0
    assert reduce_events([], _at(17)) == 0


def test_single_in_out():
    events = [_ev(EntryType.CLOCK_IN, _at(9)), _ev(EntryType.CLOCK_OUT, _at(12, 30))]
    assert reduce_events(events) == int(3.5 * HOUR_MS)


def test_workday_with_break_is_eight_hours():
    assert reduce_events(_workday()) == 28_800_000


def test_open_session_accrues_to_reference_now():
    events = [_ev(EntryType.CLOCK_IN, _at(9))]
    assert reduce_events(events, _at(17)) == 8 * HOUR_MS


def test_open_session_without_reference_is_not_counted():
    events = [_ev(EntryType.CLOCK_IN, _at(9))]
    assert reduce_events(events, None) == 0


def test_single_clock_in_with_far_future_now_counts_full_span():
    events = [_ev(EntryType.CLOCK_IN, _at(9))]
    assert reduce_events(events, _at(9) + timedelta(days=3)) == 72 * HOUR_MS


def test_second_clock_in_overwrites_first():
    events = [
        _ev(EntryType.CLOCK_IN, _at(8)),
        _ev(EntryType.CLOCK_IN, _at(10)),
        _ev(EntryType.CLOCK_OUT, _at(12)),
    ]
    assert reduce_events(events) == 2 * HOUR_MS


def test_break_start_without_clock_in_only_marks_break():
    state = fold_events([_ev(EntryType.BREAK_START, _at(10))])
    assert state == ReducerState(open_clock_in=None, on_break=True, total_ms=0)
    assert reduce_events([_ev(EntryType.BREAK_START, _at(10))], _at(17)) == 0


def test_second_clock_out_is_noop():
    events = [
        _ev(EntryType.CLOCK_IN, _at(9)),
        _ev(EntryType.CLOCK_OUT, _at(11)),
        _ev(EntryType.CLOCK_OUT, _at(15)),
    ]
    assert reduce_events(events) == 2 * HOUR_MS


def test_break_end_restarts_span_and_drops_open_one():
    # in 09:00, break_end 10:00 without a break: 09-10 is discarded
    events = [
        _ev(EntryType.CLOCK_IN, _at(9)),
        _ev(EntryType.BREAK_END, _at(10)),
        _ev(EntryType.CLOCK_OUT, _at(12)),
    ]
    assert reduce_events(events) == 2 * HOUR_MS


def test_on_break_session_does_not_accrue():
    events = [_ev(EntryType.CLOCK_IN, _at(9)), _ev(EntryType.BREAK_START, _at(13))]
    assert reduce_events(events, _at(17)) == 4 * HOUR_MS
    assert fold_events(events).on_break is True


def test_order_insensitive():
    events = _workday()
    shuffled = [events[2], events[0], events[3], events[1]]
    assert reduce_events(shuffled) == reduce_events(events)


def test_idempotent_and_does_not_mutate_input():
    events = _workday()
    snapshot = list(events)

    first = reduce_events(events, _at(20))
    second = reduce_events(events, _at(20))

    assert first == second
    assert events == snapshot


def test_reference_before_clock_in_never_goes_negative():
    events = [_ev(EntryType.CLOCK_IN, _at(9))]
    assert reduce_events(events, _at(8)) == 0

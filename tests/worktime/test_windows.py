from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from src.timeclock_system.timeclock_system.core.enums import EntryType
from src.timeclock_system.timeclock_system.time_entries.model import TimeEvent
from src.timeclock_system.timeclock_system.worktime.windows import (
    carry_in,
    daily_total,
    events_in_range,
    monthly_buckets,
    per_day_totals,
    range_reference,
    range_total,
)

HOUR_MS = 3_600_000
UTC = timezone.utc
MADRID = ZoneInfo("Europe/Madrid")


def _ev(kind: EntryType, ts: datetime) -> TimeEvent:
    return TimeEvent(employee_id="emp-1", timestamp=ts, kind=kind)


def _shift(day: date, start_h: int, end_h: int) -> list[TimeEvent]:
    return [
        _ev(EntryType.CLOCK_IN, datetime(day.year, day.month, day.day, start_h, tzinfo=UTC)),
        _ev(EntryType.CLOCK_OUT, datetime(day.year, day.month, day.day, end_h, tzinfo=UTC)),
    ]


def test_daily_total_uses_the_given_timezone():
    # 23:30 UTC on the 17th is already the 18th in Madrid
    events = [
        _ev(EntryType.CLOCK_IN, datetime(2026, 3, 17, 23, 30, tzinfo=UTC)),
        _ev(EntryType.CLOCK_OUT, datetime(2026, 3, 18, 2, 30, tzinfo=UTC)),
    ]
    assert daily_total(events, date(2026, 3, 18), MADRID) == 3 * HOUR_MS
    assert daily_total(events, date(2026, 3, 17), UTC) == 0
    assert daily_total(events, date(2026, 3, 18), UTC) == 0


def test_daily_total_extrapolates_only_with_reference():
    events = [_ev(EntryType.CLOCK_IN, datetime(2026, 3, 18, 9, tzinfo=UTC))]
    now = datetime(2026, 3, 18, 17, tzinfo=UTC)
    assert daily_total(events, date(2026, 3, 18), UTC, now) == 8 * HOUR_MS
    assert daily_total(events, date(2026, 3, 18), UTC) == 0


def test_range_bounds_are_inclusive():
    start = datetime(2026, 3, 1, tzinfo=UTC)
    end = datetime(2026, 3, 2, tzinfo=UTC)
    inside = _ev(EntryType.CLOCK_IN, start)
    edge = _ev(EntryType.CLOCK_OUT, end)
    outside = _ev(EntryType.CLOCK_IN, datetime(2026, 3, 2, 0, 0, 1, tzinfo=UTC))
    assert events_in_range([inside, edge, outside], start, end) == [inside, edge]


def test_range_reference_picks_now_for_live_windows():
    end = datetime(2026, 3, 31, 23, 59, tzinfo=UTC)
    now = datetime(2026, 3, 18, 17, tzinfo=UTC)
    assert range_reference(end, now) == now
    assert range_reference(now, end) == now


def test_range_total_open_session_in_past_window_accrues_to_end():
    start = datetime(2026, 3, 2, tzinfo=UTC)
    end = datetime(2026, 3, 2, 20, tzinfo=UTC)
    now = datetime(2026, 3, 18, 17, tzinfo=UTC)
    events = [_ev(EntryType.CLOCK_IN, datetime(2026, 3, 2, 9, tzinfo=UTC))]
    assert range_total(events, start, end, now) == 11 * HOUR_MS


def test_range_total_open_session_in_live_window_accrues_to_now():
    start = datetime(2026, 3, 18, tzinfo=UTC)
    end = datetime(2026, 3, 18, 23, 59, tzinfo=UTC)
    now = datetime(2026, 3, 18, 17, tzinfo=UTC)
    events = [_ev(EntryType.CLOCK_IN, datetime(2026, 3, 18, 9, tzinfo=UTC))]
    assert range_total(events, start, end, now) == 8 * HOUR_MS


def test_monthly_buckets_has_twelve_months_in_hours():
    events = _shift(date(2026, 1, 5), 9, 17) + _shift(date(2026, 3, 10), 8, 12) + _shift(date(2025, 12, 1), 9, 10)
    buckets = monthly_buckets(events, 2026, UTC)

    assert len(buckets) == 12
    assert buckets[0] == 8.0
    assert buckets[2] == 4.0
    assert sum(buckets) == 12.0


def test_monthly_buckets_sum_matches_yearly_range_total():
    events = _shift(date(2026, 2, 3), 9, 17) + _shift(date(2026, 6, 1), 9, 13) + _shift(date(2026, 11, 30), 14, 18)
    start = datetime(2026, 1, 1, tzinfo=UTC)
    end = datetime(2026, 12, 31, 23, 59, 59, tzinfo=UTC)
    now = datetime(2027, 1, 15, tzinfo=UTC)

    assert sum(monthly_buckets(events, 2026, UTC)) * HOUR_MS == range_total(events, start, end, now)


def test_session_crossing_month_boundary_is_lost_by_monthly_buckets():
    # Night shift 31 Jan 22:00 -> 1 Feb 06:00 counts in neither month.
    events = [
        _ev(EntryType.CLOCK_IN, datetime(2026, 1, 31, 22, tzinfo=UTC)),
        _ev(EntryType.CLOCK_OUT, datetime(2026, 2, 1, 6, tzinfo=UTC)),
    ]
    start = datetime(2026, 1, 1, tzinfo=UTC)
    end = datetime(2026, 12, 31, 23, 59, 59, tzinfo=UTC)
    now = datetime(2027, 1, 15, tzinfo=UTC)

    buckets = monthly_buckets(events, 2026, UTC)
    assert buckets[0] == 0.0
    assert buckets[1] == 0.0
    assert range_total(events, start, end, now) == 8 * HOUR_MS


def test_per_day_totals_only_for_days_with_events():
    events = _shift(date(2026, 3, 3), 9, 17) + _shift(date(2026, 3, 1), 10, 12)
    assert per_day_totals(events, UTC) == {
        date(2026, 3, 1): 2 * HOUR_MS,
        date(2026, 3, 3): 8 * HOUR_MS,
    }


def test_carry_in_reproduces_state_at_window_start():
    at = datetime(2026, 4, 1, tzinfo=UTC)
    working = _ev(EntryType.BREAK_END, datetime(2026, 3, 31, 21, tzinfo=UTC))
    paused = _ev(EntryType.BREAK_START, datetime(2026, 3, 31, 21, tzinfo=UTC))
    closed = _ev(EntryType.CLOCK_OUT, datetime(2026, 3, 31, 21, tzinfo=UTC))

    carried = carry_in(working, at)
    assert [(e.kind, e.timestamp) for e in carried] == [(EntryType.CLOCK_IN, at)]
    assert [e.kind for e in carry_in(paused, at)] == [EntryType.BREAK_START]
    assert carry_in(closed, at) == []
    assert carry_in(None, at) == []


def test_carried_session_counts_only_inside_window():
    at = datetime(2026, 4, 1, tzinfo=UTC)
    previous = _ev(EntryType.CLOCK_IN, datetime(2026, 3, 31, 22, tzinfo=UTC))
    events = carry_in(previous, at) + [_ev(EntryType.CLOCK_OUT, datetime(2026, 4, 1, 6, tzinfo=UTC))]

    assert range_total(events, at, datetime(2026, 4, 30, tzinfo=UTC), datetime(2026, 4, 2, tzinfo=UTC)) == 6 * HOUR_MS

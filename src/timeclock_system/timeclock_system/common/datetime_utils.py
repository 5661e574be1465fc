from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import MS_PER_HOUR, MS_PER_MINUTE
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Values without an offset are taken as UTC, which is how the backend
    stores them.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        raw = (value or "").strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError(f"Invalid timestamp: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def get_zone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {name!r}")


def now_utc() -> datetime:
    """Current time (aware, UTC).

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def local_date(ts: datetime, tz: tzinfo) -> date:
    return ts.astimezone(tz).date()


def start_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz)


def iter_days(start: date, end: date):
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def period_bounds(period: str, today: date) -> tuple[date, date]:
    """Date range for the history quick filters: today, week (Mon-Sun), month."""
    if period == "today":
        return today, today
    if period == "week":
        monday = today - timedelta(days=today.weekday())
        return monday, monday + timedelta(days=6)
    if period == "month":
        first = today.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        return first, next_month - timedelta(days=1)
    raise ValidationError(f"Unknown period: {period!r}")


def to_millis(delta: timedelta) -> int:
    return int(delta.total_seconds() * 1000)


def ms_to_hours(ms: int) -> float:
    return ms / MS_PER_HOUR


def format_duration(ms: int) -> str:
    """Render milliseconds as ``"8h 30m"`` (history and dashboard cards)."""
    hours = ms // MS_PER_HOUR
    minutes = (ms % MS_PER_HOUR) // MS_PER_MINUTE
    return f"{hours}h {minutes}m"


def format_hm(ms: int) -> str:
    """Render milliseconds as ``"H:MM"`` (official report break column)."""
    hours = ms // MS_PER_HOUR
    minutes = (ms % MS_PER_HOUR) // MS_PER_MINUTE
    return f"{hours}:{minutes:02d}"

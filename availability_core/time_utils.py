"""Shared date/time utilities used by the filter and calendar logic."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, time, timedelta, timezone

UTC = timezone.utc
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def parse_hhmm(value: str | time | None) -> time | None:
    """Parse HH:MM or HH:MM:SS (Postgres `time`) into a `time`."""
    if isinstance(value, time):
        return value
    if not value or ":" not in str(value):
        return None
    parts = str(value).strip().split(":")
    try:
        h = int(parts[0])
        m = int(parts[1])
        s = int(float(parts[2])) if len(parts) > 2 and parts[2] else 0
    except (TypeError, ValueError):
        return None
    if h < 0 or h > 23 or m < 0 or m > 59 or s < 0 or s > 59:
        return None
    return time(h, m, s)


def parse_date(value: str | date | None) -> date | None:
    """Parse an ISO calendar date. Datetimes are reduced to their date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse an ISO timestamp; naive values are read as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def fmt_hhmm(value: time | None) -> str:
    if value is None:
        return ""
    return value.strftime("%H:%M")


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in [start, end]. Empty when end < start."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def time_within(at: time, start: time | None, end: time | None) -> bool:
    """Return True if `at` lies in the inclusive window [start, end].

    A missing bound leaves that side open. A reversed window (end < start)
    contains nothing.
    """
    if start is None and end is None:
        return True
    if start is None:
        return at <= end
    if end is None:
        return at >= start
    return start <= at <= end

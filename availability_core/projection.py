"""Calendar activity projection: which records are in effect on a given day.

A record is active on a day when the day lies inside its (clamped) date
range and, for recurring records, the day's weekday is one of the record's
weekdays. Recurring records without weekdays are never active, and neither
are malformed records (no start date or no locations).
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import date

from .models import AvailabilityRecord
from .time_utils import iter_days, weekday_name


@dataclass(frozen=True)
class CalendarDay:
    day: date
    entries: tuple[AvailabilityRecord, ...]
    people: int

    @property
    def has_entries(self) -> bool:
        return bool(self.entries)


def is_active_on(record: AvailabilityRecord, day: date) -> bool:
    if not record.locations or not record.covers(day):
        return False
    if not record.is_recurring:
        return True
    return weekday_name(day) in record.weekdays


def active_on(records: Iterable[AvailabilityRecord], day: date) -> list[AvailabilityRecord]:
    """Records in effect on `day`, in input order."""
    return [r for r in records if is_active_on(r, day)]


def active_days(record: AvailabilityRecord, start: date, end: date) -> Iterator[date]:
    """Days within [start, end] on which the record is active."""
    bounds = record.span()
    if bounds is None:
        return
    lo = max(start, bounds[0])
    hi = min(end, bounds[1])
    for day in iter_days(lo, hi):
        if is_active_on(record, day):
            yield day


def group_by_person(records: Iterable[AvailabilityRecord]) -> dict[str, list[AvailabilityRecord]]:
    grouped: dict[str, list[AvailabilityRecord]] = {}
    for record in records:
        grouped.setdefault(record.full_name, []).append(record)
    return grouped


def count_people(records: Iterable[AvailabilityRecord]) -> int:
    return len(group_by_person(records))


def day_summary(records: Sequence[AvailabilityRecord], day: date) -> CalendarDay:
    entries = active_on(records, day)
    return CalendarDay(day=day, entries=tuple(entries), people=count_people(entries))


def month_grid(
    records: Sequence[AvailabilityRecord],
    year: int,
    month: int,
) -> list[list[CalendarDay | None]]:
    """Monday-first weeks for a month view.

    Cells outside the month are None so every week has seven entries.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1-12, got {month}")
    weeks: list[list[CalendarDay | None]] = []
    for week in calendar.Calendar(firstweekday=0).monthdatescalendar(year, month):
        weeks.append([
            day_summary(records, d) if d.month == month else None
            for d in week
        ])
    return weeks

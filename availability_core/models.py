"""Record and criteria types shared by the filter, sorter and calendar."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, time

from .time_utils import WEEKDAYS

# ---- Vocabularies ------------------------------------------------------------

# Values used by the availability form, the admin filter and the calendar legend.
SHIFT_TYPES = frozenset({
    "earlyShift",
    "lateShift",
    "nightShift",
    "flexible",
    "dayShift",
    "weekend",
    "allShifts",
})

MOBILE_YES = "yes"
MOBILE_NO = "no"
# Criteria-only value: match records whose flag was never answered.
MOBILE_UNSET = "unset"
MOBILE_FLAGS = frozenset({MOBILE_YES, MOBILE_NO})

SORT_NAME = "name"
SORT_DATE = "date"
SORT_LOCATION = "location"
SORT_SHIFT_TYPE = "shiftType"
SORT_CREATED_AT = "createdAt"
SORT_FIELDS = frozenset({SORT_NAME, SORT_DATE, SORT_LOCATION, SORT_SHIFT_TYPE, SORT_CREATED_AT})

ASC = "asc"
DESC = "desc"
SORT_DIRECTIONS = frozenset({ASC, DESC})


class InvalidCriteriaError(ValueError):
    """Raised when a caller passes criteria or a sort key outside its domain."""


def normalize_labels(values: Iterable[str | None] | None) -> tuple[str, ...]:
    """Trim labels, drop blanks and case-insensitive duplicates, keep order."""
    if not values:
        return ()
    seen: set[str] = set()
    out: list[str] = []
    for raw in values:
        label = str(raw or "").strip()
        if not label:
            continue
        key = label.casefold()
        if key in seen:
            continue
        seen.add(key)
        out.append(label)
    return tuple(out)


def full_name(first_name: str | None, last_name: str | None) -> str:
    return f"{first_name or ''} {last_name or ''}"


@dataclass(frozen=True)
class PersonProfile:
    id: str
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    guard_id_number: str | None = None
    e_pin_number: str | None = None
    email: str | None = None
    personal_data_completed: bool = False
    rules_acknowledged: bool = False
    onboarding_completed: bool = False

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name)


@dataclass(frozen=True)
class AvailabilityRecord:
    """One availability submission with the owner's profile fields inlined."""

    id: str
    start_date: date | None
    end_date: date | None = None
    owner_id: str | None = None
    start_time: time | None = None
    end_time: time | None = None
    shift_type: str | None = None
    locations: tuple[str, ...] = ()
    location_text: str = ""
    mobile_deployable: str | None = None
    is_recurring: bool = False
    weekdays: frozenset[str] = field(default_factory=frozenset)
    notes: str | None = None
    created_at: datetime | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    guard_id_number: str | None = None
    e_pin_number: str | None = None

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name)

    @property
    def effective_end(self) -> date | None:
        """End date, defaulted to and clamped at `start_date`."""
        if self.start_date is None:
            return None
        if self.end_date is None or self.end_date < self.start_date:
            return self.start_date
        return self.end_date

    def span(self) -> tuple[date, date] | None:
        """Inclusive (start, end) interval, or None for a malformed record."""
        if self.start_date is None:
            return None
        return self.start_date, self.effective_end

    def covers(self, day: date) -> bool:
        bounds = self.span()
        if bounds is None:
            return False
        return bounds[0] <= day <= bounds[1]

    def sorted_weekdays(self) -> list[str]:
        return [d for d in WEEKDAYS if d in self.weekdays]


@dataclass(frozen=True)
class FilterCriteria:
    """Independently optional predicates; None (or empty) means unconstrained."""

    search_text: str | None = None
    shift_type: str | None = None
    location: str | None = None
    mobile_deployable: str | None = None
    is_recurring: bool | None = None
    weekdays_any: frozenset[str] | None = None
    on_date: date | None = None
    at_time: time | None = None

    def is_empty(self) -> bool:
        return not any((
            (self.search_text or "").strip(),
            self.shift_type,
            (self.location or "").strip(),
            self.mobile_deployable,
            self.is_recurring is not None,
            self.weekdays_any,
            self.on_date,
            self.at_time,
        ))

"""Compound predicate filter over availability records.

All criteria combine with AND. Within the free-text search the record's
fields combine with OR. Unset criteria never remove a record, and the
output keeps the input order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, time
from typing import Any

from .models import (
    MOBILE_FLAGS,
    MOBILE_UNSET,
    SHIFT_TYPES,
    AvailabilityRecord,
    FilterCriteria,
    InvalidCriteriaError,
    PersonProfile,
)
from .time_utils import WEEKDAYS, parse_date, parse_hhmm, time_within

logger = logging.getLogger(__name__)

# Value the dashboard selects use for "no filter".
ALL = "all"

_TRUE_WORDS = frozenset({"true", "1", "yes"})
_FALSE_WORDS = frozenset({"false", "0", "no"})


def _fold(value: Any) -> str:
    return str(value or "").casefold()


def _clean_text(value: str | None) -> str:
    return (value or "").strip()


def validate_criteria(criteria: FilterCriteria) -> FilterCriteria:
    """Fail fast on criteria values outside their domain.

    Returns the criteria unchanged so it can be used inline.
    """
    if not isinstance(criteria, FilterCriteria):
        raise InvalidCriteriaError(
            f"expected FilterCriteria, got {type(criteria).__name__}"
        )
    if criteria.search_text is not None and not isinstance(criteria.search_text, str):
        raise InvalidCriteriaError("search_text must be a string")
    if criteria.location is not None and not isinstance(criteria.location, str):
        raise InvalidCriteriaError("location must be a string")
    if criteria.shift_type and (
        not isinstance(criteria.shift_type, str) or criteria.shift_type not in SHIFT_TYPES
    ):
        raise InvalidCriteriaError(
            f"unknown shift type '{criteria.shift_type}'. "
            f"Expected one of: {', '.join(sorted(SHIFT_TYPES))}"
        )
    if criteria.mobile_deployable and (
        not isinstance(criteria.mobile_deployable, str)
        or criteria.mobile_deployable not in MOBILE_FLAGS | {MOBILE_UNSET}
    ):
        raise InvalidCriteriaError(
            f"unknown mobile deployment flag '{criteria.mobile_deployable}'"
        )
    if criteria.is_recurring is not None and not isinstance(criteria.is_recurring, bool):
        raise InvalidCriteriaError("is_recurring must be a bool or None")
    if criteria.weekdays_any:
        if isinstance(criteria.weekdays_any, str):
            raise InvalidCriteriaError("weekdays_any must be a collection of weekday names")
        unknown = sorted({repr(d) for d in criteria.weekdays_any if not isinstance(d, str) or d not in WEEKDAYS})
        if unknown:
            raise InvalidCriteriaError(f"unknown weekday name(s): {', '.join(unknown)}")
    if criteria.on_date is not None and (
        not isinstance(criteria.on_date, date) or isinstance(criteria.on_date, datetime)
    ):
        raise InvalidCriteriaError("on_date must be a datetime.date")
    if criteria.at_time is not None and not isinstance(criteria.at_time, time):
        raise InvalidCriteriaError("at_time must be a datetime.time")
    return criteria


def search_haystack(record: AvailabilityRecord) -> list[str]:
    """Casefolded fields the free-text search looks at."""
    return [
        _fold(record.full_name),
        _fold(record.phone_number),
        _fold(", ".join(record.locations)),
        _fold(record.notes),
        _fold(record.shift_type),
        _fold(",".join(record.sorted_weekdays())),
        _fold(record.guard_id_number),
        _fold(record.e_pin_number),
    ]


def _matches_search(record: AvailabilityRecord, needle: str) -> bool:
    return any(needle in field for field in search_haystack(record))


def _matches_location(record: AvailabilityRecord, location: str) -> bool:
    wanted = location.casefold()
    return any(label.casefold() == wanted for label in record.locations)


def _matches_mobile(record: AvailabilityRecord, flag: str) -> bool:
    if flag == MOBILE_UNSET:
        return record.mobile_deployable is None
    return record.mobile_deployable == flag


def _matches_weekdays(record: AvailabilityRecord, weekdays: frozenset[str]) -> bool:
    if not record.is_recurring:
        return False
    return bool(record.weekdays & set(weekdays))


def _matches_time(record: AvailabilityRecord, at: time) -> bool:
    return time_within(at, record.start_time, record.end_time)


def matches(record: AvailabilityRecord, criteria: FilterCriteria) -> bool:
    """Single-record predicate. Assumes the criteria were validated.

    A record without a start date is malformed and matches nothing;
    `filter_records` still returns it for empty criteria.
    """
    if record.start_date is None:
        return False
    needle = _clean_text(criteria.search_text).casefold()
    if needle and not _matches_search(record, needle):
        return False
    if criteria.shift_type and record.shift_type != criteria.shift_type:
        return False
    location = _clean_text(criteria.location)
    if location and not _matches_location(record, location):
        return False
    if criteria.mobile_deployable and not _matches_mobile(record, criteria.mobile_deployable):
        return False
    if criteria.is_recurring is not None and record.is_recurring != criteria.is_recurring:
        return False
    if criteria.weekdays_any and not _matches_weekdays(record, criteria.weekdays_any):
        return False
    if criteria.on_date is not None and not record.covers(criteria.on_date):
        return False
    if criteria.at_time is not None and not _matches_time(record, criteria.at_time):
        return False
    return True


def filter_records(
    records: Sequence[AvailabilityRecord],
    criteria: FilterCriteria | None = None,
) -> list[AvailabilityRecord]:
    """Return the records matching every set criterion, in input order."""
    if criteria is None:
        return list(records)
    validate_criteria(criteria)
    if criteria.is_empty():
        return list(records)
    result = [r for r in records if matches(r, criteria)]
    logger.debug("filter kept %d of %d records", len(result), len(records))
    return result


def location_options(records: Iterable[AvailabilityRecord]) -> list[str]:
    """Distinct location labels across records, for the location selector."""
    seen: dict[str, str] = {}
    for record in records:
        for label in record.locations:
            seen.setdefault(label.casefold(), label)
    return sorted(seen.values(), key=str.casefold)


# ---- Employee overview -------------------------------------------------------

def _profile_haystack(profile: PersonProfile) -> list[str]:
    return [
        _fold(profile.full_name),
        _fold(profile.email),
        _fold(profile.phone_number),
        _fold(profile.guard_id_number),
    ]


def filter_profiles(
    profiles: Iterable[PersonProfile],
    search_text: str | None = None,
) -> list[PersonProfile]:
    """Employee search over name, email, phone and guard ID, in input order.

    Blank search returns every profile.
    """
    if search_text is not None and not isinstance(search_text, str):
        raise InvalidCriteriaError("search_text must be a string")
    needle = _clean_text(search_text).casefold()
    if not needle:
        return list(profiles)
    return [p for p in profiles if any(needle in field for field in _profile_haystack(p))]


def onboarding_summary(profiles: Iterable[PersonProfile]) -> dict[str, int]:
    """Head counts per onboarding stage.

    `in_progress` has personal data but no completed onboarding;
    `not_started` has no personal data yet.
    """
    profiles = list(profiles)
    return {
        "total": len(profiles),
        "completed": sum(1 for p in profiles if p.onboarding_completed),
        "in_progress": sum(
            1 for p in profiles if p.personal_data_completed and not p.onboarding_completed
        ),
        "not_started": sum(1 for p in profiles if not p.personal_data_completed),
    }


# ---- Parameter parsing -------------------------------------------------------

def _param(params: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        value = params.get(name)
        if value is None:
            continue
        if isinstance(value, str):
            value = value.strip()
            if not value or value.casefold() == ALL:
                continue
        return value
    return None


def _parse_bool(value: Any, name: str) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise InvalidCriteriaError(f"{name} must be true/false, got '{value}'")


def _parse_weekdays(value: Any) -> frozenset[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)
    days = frozenset(str(d).strip().lower() for d in items if str(d).strip())
    return days or None


def criteria_from_params(params: Mapping[str, Any]) -> FilterCriteria:
    """Build criteria from string parameters (dashboard controls, CLI flags).

    Blank values and the literal "all" leave a dimension unset. Both
    snake_case and camelCase keys are accepted.
    """
    on_date_raw = _param(params, "on_date", "onDate", "date")
    at_time_raw = _param(params, "at_time", "atTime", "time")

    on_date = parse_date(on_date_raw) if on_date_raw is not None else None
    if on_date_raw is not None and on_date is None:
        raise InvalidCriteriaError(f"on_date is not an ISO date: '{on_date_raw}'")
    at_time = parse_hhmm(at_time_raw) if at_time_raw is not None else None
    if at_time_raw is not None and at_time is None:
        raise InvalidCriteriaError(f"at_time is not HH:MM: '{at_time_raw}'")

    criteria = FilterCriteria(
        search_text=_param(params, "search_text", "searchText", "search"),
        shift_type=_param(params, "shift_type", "shiftType"),
        location=_param(params, "location"),
        mobile_deployable=_param(params, "mobile_deployable", "mobileDeployable"),
        is_recurring=_parse_bool(_param(params, "is_recurring", "isRecurring"), "is_recurring"),
        weekdays_any=_parse_weekdays(_param(params, "weekdays_any", "weekdaysAny", "weekdays")),
        on_date=on_date,
        at_time=at_time,
    )
    return validate_criteria(criteria)

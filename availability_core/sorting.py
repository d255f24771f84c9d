"""Stable single-field ordering for the dashboard table."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable, Sequence
from datetime import date
from typing import Any

from .models import (
    ASC,
    DESC,
    SORT_CREATED_AT,
    SORT_DATE,
    SORT_DIRECTIONS,
    SORT_FIELDS,
    SORT_LOCATION,
    SORT_NAME,
    SORT_SHIFT_TYPE,
    AvailabilityRecord,
    InvalidCriteriaError,
)
from .time_utils import EPOCH, UTC

_FIELD_ALIASES = {
    "shift_type": SORT_SHIFT_TYPE,
    "created_at": SORT_CREATED_AT,
    "start_date": SORT_DATE,
}


def collation_key(value: str | None) -> tuple[str, str]:
    """Locale-style sort key for German text.

    Accents are folded onto their base letter ("Müller" sorts with
    "Muller"), "ß" becomes "ss" and case is ignored. The casefolded
    input text breaks ties so the order stays total.
    """
    text = str(value or "")
    folded = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    folded = folded.casefold().replace("ß", "ss")
    folded = re.sub(r"\s+", " ", folded).strip()
    return folded, text.casefold()


def _name_key(record: AvailabilityRecord) -> Any:
    return collation_key(record.full_name)


def _date_key(record: AvailabilityRecord) -> date:
    return record.start_date or date.min


def _location_key(record: AvailabilityRecord) -> Any:
    return collation_key(record.location_text or ", ".join(record.locations))


def _shift_type_key(record: AvailabilityRecord) -> Any:
    return collation_key(record.shift_type)


def _created_at_key(record: AvailabilityRecord):
    ts = record.created_at
    if ts is None:
        return EPOCH
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts


_KEYS: dict[str, Callable[[AvailabilityRecord], Any]] = {
    SORT_NAME: _name_key,
    SORT_DATE: _date_key,
    SORT_LOCATION: _location_key,
    SORT_SHIFT_TYPE: _shift_type_key,
    SORT_CREATED_AT: _created_at_key,
}


def normalize_sort_field(field: str) -> str:
    if not isinstance(field, str):
        raise InvalidCriteriaError(f"sort field must be a string, got {type(field).__name__}")
    name = _FIELD_ALIASES.get(field, field)
    if name not in SORT_FIELDS:
        raise InvalidCriteriaError(
            f"unknown sort field '{field}'. Expected one of: {', '.join(sorted(SORT_FIELDS))}"
        )
    return name


def normalize_direction(direction: str | None) -> str:
    if direction is None or direction == "":
        return ASC
    value = str(direction).lower()
    if value not in SORT_DIRECTIONS:
        raise InvalidCriteriaError(f"unknown sort direction '{direction}', expected 'asc' or 'desc'")
    return value


def sort_key(field: str) -> Callable[[AvailabilityRecord], Any]:
    return _KEYS[normalize_sort_field(field)]


def sort_records(
    records: Sequence[AvailabilityRecord],
    field: str,
    direction: str | None = ASC,
) -> list[AvailabilityRecord]:
    """Return a new list ordered by one field.

    Equal keys keep their input order in both directions, so toggling the
    direction back and forth on the same set is stable.
    """
    key = sort_key(field)
    reverse = normalize_direction(direction) == DESC
    return sorted(records, key=key, reverse=reverse)

"""Turn stored availability/profile rows into engine records.

This is the only place comma-joined columns are split and string dates,
times and timestamps are parsed. Bad values become None so the engine can
exclude the record from the predicates that need them.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from ..models import MOBILE_FLAGS, AvailabilityRecord, PersonProfile
from ..time_utils import WEEKDAYS, parse_date, parse_hhmm, parse_timestamp
from .schemas import join_labels, split_labels, to_bool, to_str_or_none

logger = logging.getLogger(__name__)


def _parse_weekdays(value: Any, *, row_id: str) -> frozenset[str]:
    days: set[str] = set()
    for label in split_labels(value):
        name = label.lower()
        if name in WEEKDAYS:
            days.add(name)
        else:
            logger.debug("row %s: dropping unknown weekday %r", row_id, label)
    return frozenset(days)


def _parse_mobile(value: Any) -> str | None:
    text = (to_str_or_none(value) or "").lower()
    return text if text in MOBILE_FLAGS else None


def profile_from_row(row: Mapping[str, Any]) -> PersonProfile:
    return PersonProfile(
        id=str(row.get("id") or ""),
        first_name=to_str_or_none(row.get("first_name")),
        last_name=to_str_or_none(row.get("last_name")),
        phone_number=to_str_or_none(row.get("phone_number")),
        guard_id_number=to_str_or_none(row.get("guard_id_number")),
        e_pin_number=to_str_or_none(row.get("e_pin_number")),
        email=to_str_or_none(row.get("email")),
        personal_data_completed=to_bool(row.get("personal_data_completed")),
        rules_acknowledged=to_bool(row.get("rules_acknowledged")),
        onboarding_completed=to_bool(row.get("onboarding_completed")),
    )


def record_from_row(
    row: Mapping[str, Any],
    profile: PersonProfile | None = None,
) -> AvailabilityRecord:
    """Build one record from an `availability` row, inlining the owner profile.

    Profile fields win; the row's legacy inline name/phone columns are the
    fallback for rows submitted before accounts existed.
    """
    row_id = str(row.get("id") or "")
    start = parse_date(row.get("date"))
    if start is None:
        logger.debug("row %s: missing or invalid start date %r", row_id, row.get("date"))

    raw_location = row.get("location")
    locations = split_labels(raw_location)
    if isinstance(raw_location, str):
        location_text = raw_location.strip()
    else:
        location_text = join_labels(locations)

    def owner_field(name: str) -> str | None:
        if profile is not None:
            value = getattr(profile, name)
            if value:
                return value
        return to_str_or_none(row.get(name))

    return AvailabilityRecord(
        id=row_id,
        owner_id=to_str_or_none(row.get("user_id")),
        start_date=start,
        end_date=parse_date(row.get("end_date")),
        start_time=parse_hhmm(row.get("start_time")),
        end_time=parse_hhmm(row.get("end_time")),
        shift_type=to_str_or_none(row.get("shift_type")),
        locations=locations,
        location_text=location_text,
        mobile_deployable=_parse_mobile(row.get("mobile_deployable")),
        is_recurring=to_bool(row.get("is_recurring")),
        weekdays=_parse_weekdays(row.get("weekdays"), row_id=row_id),
        notes=to_str_or_none(row.get("notes")),
        created_at=parse_timestamp(row.get("created_at")),
        first_name=owner_field("first_name"),
        last_name=owner_field("last_name"),
        phone_number=owner_field("phone_number"),
        guard_id_number=owner_field("guard_id_number"),
        e_pin_number=owner_field("e_pin_number"),
    )


def profiles_by_id(profile_rows: Iterable[Mapping[str, Any]]) -> dict[str, PersonProfile]:
    lookup: dict[str, PersonProfile] = {}
    for row in profile_rows:
        profile = profile_from_row(row)
        if profile.id:
            lookup[profile.id] = profile
    return lookup


def merge_profiles(
    rows: Iterable[Mapping[str, Any]],
    profile_rows: Iterable[Mapping[str, Any]] = (),
) -> list[AvailabilityRecord]:
    """Join profiles onto availability rows by `user_id`, keeping row order."""
    lookup = profiles_by_id(profile_rows)
    records: list[AvailabilityRecord] = []
    for row in rows:
        owner = to_str_or_none(row.get("user_id"))
        records.append(record_from_row(row, lookup.get(owner) if owner else None))
    return records


def load_records(path: Path) -> list[AvailabilityRecord]:
    """Read a JSON file of rows (or {"rows": [...], "profiles": [...]}) into records.

    Raises FileNotFoundError if the file is missing.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Required file not found: {p}")
    with open(p, encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, list):
        return merge_profiles(payload)
    return merge_profiles(payload.get("rows", []), payload.get("profiles", []))

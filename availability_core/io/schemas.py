"""Column constants, comma-list helpers, and type coercion for stored rows."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..models import normalize_labels

# ---------------------------------------------------------------------------
# Profile columns read by the employee overview
# ---------------------------------------------------------------------------

PROFILE_COLS = [
    "id",
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "guard_id_number",
    "e_pin_number",
    "onboarding_completed",
    "personal_data_completed",
    "rules_acknowledged",
    "created_at",
]

# ---------------------------------------------------------------------------
# Export column names (admin dashboard download)
# ---------------------------------------------------------------------------

EXPORT_COLS = [
    "Name",
    "Phone",
    "Date Range",
    "Time",
    "Shift",
    "Days",
    "Location",
    "Notes",
]

# ---------------------------------------------------------------------------
# Comma-separated field helpers
# ---------------------------------------------------------------------------

COMMA = ","


def split_labels(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Split a comma-joined string into trimmed, unique labels.

    Lists are accepted as well so already-parsed payloads pass through.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return normalize_labels(value.split(COMMA))
    return normalize_labels(value)


def join_labels(values: Iterable[str] | None, sep: str = ", ") -> str:
    """Join labels for display/storage. Empty/None -> empty string."""
    if not values:
        return ""
    return sep.join(str(v).strip() for v in values if v is not None and str(v).strip())


# ---------------------------------------------------------------------------
# Type coercion helpers for reading row values
# ---------------------------------------------------------------------------


def to_str_or_none(value: Any) -> str | None:
    """Coerce to a stripped string, returning None for empty values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def to_bool(value: Any) -> bool:
    """Coerce a row value to bool. True/TRUE/1/yes -> True, else False."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().upper() in ("TRUE", "1", "YES")


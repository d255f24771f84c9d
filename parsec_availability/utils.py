from __future__ import annotations

from datetime import datetime, timezone

UTC = timezone.utc


def now_utc_iso() -> str:
    return datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def parse_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM into (year, month)."""
    try:
        year_s, month_s = value.split("-", 1)
        year, month = int(year_s), int(month_s)
    except ValueError as exc:
        raise ValueError(f"expected YYYY-MM, got '{value}'") from exc
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range in '{value}'")
    return year, month

"""CSV export of the rows currently shown on the admin dashboard."""

from __future__ import annotations

import csv
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..models import AvailabilityRecord
from ..time_utils import fmt_hhmm
from .schemas import EXPORT_COLS, join_labels


def _date_range(record: AvailabilityRecord) -> str:
    if record.start_date is None:
        return ""
    return f"{record.start_date.isoformat()} - {record.effective_end.isoformat()}"


def _time_range(record: AvailabilityRecord) -> str:
    if record.start_time is None and record.end_time is None:
        return ""
    return f"{fmt_hhmm(record.start_time)} - {fmt_hhmm(record.end_time)}"


def export_row(record: AvailabilityRecord) -> dict[str, Any]:
    return {
        "Name": record.full_name.strip(),
        "Phone": record.phone_number or "",
        "Date Range": _date_range(record),
        "Time": _time_range(record),
        "Shift": record.shift_type or "",
        "Days": join_labels(record.sorted_weekdays(), sep=","),
        "Location": record.location_text or join_labels(record.locations),
        "Notes": record.notes or "",
    }


def export_rows(records: Sequence[AvailabilityRecord]) -> list[dict[str, Any]]:
    """One dict per record, keys in EXPORT_COLS order, input order kept."""
    return [export_row(r) for r in records]


def default_export_name(now: datetime | None = None, *, suffix: str = "csv") -> str:
    now = now or datetime.now(timezone.utc)
    stamp = now.replace(microsecond=0).isoformat().replace("+00:00", "Z").replace(":", "-")
    return f"availability-{stamp}.{suffix}"


def write_csv(records: Sequence[AvailabilityRecord], path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=EXPORT_COLS)
        writer.writeheader()
        writer.writerows(export_rows(records))
    return path

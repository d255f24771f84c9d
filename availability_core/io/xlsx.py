"""Render the dashboard view to a multi-sheet XLSX workbook."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, timezone
from pathlib import Path

from ..models import AvailabilityRecord
from ..projection import month_grid
from .exporters import export_rows
from .schemas import EXPORT_COLS

_WEEKDAY_DE = ["Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"]

_CALENDAR_DAY_COLS = ["date", "weekday", "people", "entries", "names"]


def _get_openpyxl():
    try:
        from openpyxl import Workbook
        from openpyxl.styles import Font, PatternFill
        return Workbook, Font, PatternFill
    except ImportError as exc:
        raise ImportError("openpyxl is required for XLSX export: pip install openpyxl") from exc


def _style_headers(worksheets):
    """Apply bold + blue fill to header row of each worksheet."""
    _, Font, PatternFill = _get_openpyxl()
    header_font = Font(bold=True)
    header_fill = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
    for ws in worksheets:
        for cell in ws[1]:
            cell.font = header_font
            cell.fill = header_fill
        ws.freeze_panes = "A2"


def _format_date_de(d: date) -> str:
    """DD.MM.YYYY, the format the admins read dates in."""
    return f"{d.day:02d}.{d.month:02d}.{d.year}"


def render_xlsx(
    records: Sequence[AvailabilityRecord],
    path: Path,
    *,
    month: tuple[int, int] | None = None,
    generated_at: datetime | None = None,
) -> Path:
    """Write records (already filtered and sorted) to an XLSX workbook.

    Sheets: Overview, Availability, and Calendar when `month=(year, month)`
    is given. The Calendar sheet lists every day of the month with the
    number of distinct people available.
    """
    Workbook, _, _ = _get_openpyxl()
    path = Path(path)
    generated_at = generated_at or datetime.now(timezone.utc)

    wb = Workbook()

    # --- Overview sheet ---
    ws_overview = wb.active
    ws_overview.title = "Overview"
    ws_overview.append(["Field", "Value"])
    people = {r.full_name for r in records}
    overview_fields = [
        ("generated_at", generated_at.replace(microsecond=0).isoformat()),
        ("entries", len(records)),
        ("people", len(people)),
        ("recurring_entries", sum(1 for r in records if r.is_recurring)),
        ("mobile_deployable", sum(1 for r in records if r.mobile_deployable == "yes")),
    ]
    if month is not None:
        overview_fields.append(("calendar_month", f"{month[0]:04d}-{month[1]:02d}"))
    for field, value in overview_fields:
        ws_overview.append([field, value])

    # --- Availability sheet ---
    ws_rows = wb.create_sheet("Availability")
    ws_rows.append(EXPORT_COLS)
    for row in export_rows(records):
        ws_rows.append([row.get(c, "") for c in EXPORT_COLS])

    all_sheets = [ws_overview, ws_rows]

    # --- Calendar sheet ---
    if month is not None:
        ws_cal = wb.create_sheet("Calendar")
        ws_cal.append(_CALENDAR_DAY_COLS)
        for week in month_grid(records, month[0], month[1]):
            for cell in week:
                if cell is None:
                    continue
                names = sorted({r.full_name.strip() for r in cell.entries})
                ws_cal.append([
                    _format_date_de(cell.day),
                    _WEEKDAY_DE[cell.day.weekday()],
                    cell.people,
                    len(cell.entries),
                    ", ".join(names),
                ])
        all_sheets.append(ws_cal)

    _style_headers(all_sheets)

    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(path))
    return path

"""Input/output layer for availability records.

Public API:
    record_from_row(row, profile)    -- one stored row -> AvailabilityRecord
    merge_profiles(rows, profiles)   -- join owner profiles onto rows
    load_records(path)               -- JSON rows file -> records
    write_csv(records, path)         -- dashboard CSV export
    render_xlsx(records, path)       -- multi-sheet XLSX export
"""

from .exporters import default_export_name, export_rows, write_csv
from .reader import load_records, merge_profiles, profile_from_row, record_from_row
from .schemas import join_labels, split_labels

__all__ = [
    "default_export_name",
    "export_rows",
    "join_labels",
    "load_records",
    "merge_profiles",
    "profile_from_row",
    "record_from_row",
    "split_labels",
    "write_csv",
]


# Lazy import for the optional heavy dependency (openpyxl).
def render_xlsx(*args, **kwargs):
    from .xlsx import render_xlsx as _fn
    return _fn(*args, **kwargs)

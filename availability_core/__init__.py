"""Availability filtering, sorting and calendar projection for the admin dashboard."""

from .filters import (
    criteria_from_params,
    filter_profiles,
    filter_records,
    location_options,
    matches,
    onboarding_summary,
    validate_criteria,
)
from .models import (
    AvailabilityRecord,
    FilterCriteria,
    InvalidCriteriaError,
    PersonProfile,
)
from .projection import (
    CalendarDay,
    active_days,
    active_on,
    count_people,
    day_summary,
    group_by_person,
    is_active_on,
    month_grid,
)
from .sorting import sort_records

# openpyxl stays unimported until render_xlsx is called.
from .io import load_records, merge_profiles, record_from_row, write_csv

__all__ = [
    "AvailabilityRecord",
    "CalendarDay",
    "FilterCriteria",
    "InvalidCriteriaError",
    "PersonProfile",
    "active_days",
    "active_on",
    "count_people",
    "criteria_from_params",
    "day_summary",
    "filter_profiles",
    "filter_records",
    "group_by_person",
    "is_active_on",
    "load_records",
    "location_options",
    "matches",
    "merge_profiles",
    "month_grid",
    "onboarding_summary",
    "record_from_row",
    "sort_records",
    "validate_criteria",
    "write_csv",
]

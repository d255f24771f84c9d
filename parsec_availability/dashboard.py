"""Caller-side state for the admin dashboard.

Holds the current snapshot, filter criteria, sort selection and selected
calendar day, and recomputes views from them on every call. Nothing is
cached: after a change notification the caller swaps the snapshot in and
asks again.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date

from availability_core.filters import filter_records, location_options, validate_criteria
from availability_core.models import ASC, DESC, SORT_CREATED_AT, AvailabilityRecord, FilterCriteria
from availability_core.projection import CalendarDay, day_summary, month_grid
from availability_core.sorting import normalize_direction, normalize_sort_field, sort_records


@dataclass(frozen=True)
class SortState:
    field: str = SORT_CREATED_AT
    direction: str = DESC

    def toggle(self, field: str) -> SortState:
        """Same field flips the direction; a new field starts ascending."""
        name = normalize_sort_field(field)
        if name == self.field:
            return SortState(name, ASC if self.direction == DESC else DESC)
        return SortState(name, ASC)


class DashboardSession:
    def __init__(
        self,
        records: Sequence[AvailabilityRecord] = (),
        *,
        criteria: FilterCriteria | None = None,
        sort: SortState | None = None,
    ):
        self._records: tuple[AvailabilityRecord, ...] = tuple(records)
        self.criteria = validate_criteria(criteria or FilterCriteria())
        # Newest submissions first, matching the fetch order.
        self.sort = sort or SortState()
        normalize_direction(self.sort.direction)
        self.selected_day: date | None = None

    @property
    def records(self) -> tuple[AvailabilityRecord, ...]:
        return self._records

    def replace_snapshot(self, records: Sequence[AvailabilityRecord]) -> None:
        self._records = tuple(records)

    def set_criteria(self, criteria: FilterCriteria) -> None:
        self.criteria = validate_criteria(criteria)

    def update_criteria(self, **changes) -> None:
        self.set_criteria(replace(self.criteria, **changes))

    def clear_criteria(self) -> None:
        self.criteria = FilterCriteria()

    def toggle_sort(self, field: str) -> SortState:
        self.sort = self.sort.toggle(field)
        return self.sort

    def select_day(self, day: date | None) -> None:
        self.selected_day = day

    def filtered(self) -> list[AvailabilityRecord]:
        return filter_records(self._records, self.criteria)

    def view(self) -> list[AvailabilityRecord]:
        """Filtered records in the selected sort order."""
        return sort_records(self.filtered(), self.sort.field, self.sort.direction)

    def location_options(self) -> list[str]:
        return location_options(self._records)

    def calendar(self, year: int, month: int) -> list[list[CalendarDay | None]]:
        return month_grid(self._records, year, month)

    def selected_entries(self) -> CalendarDay | None:
        if self.selected_day is None:
            return None
        return day_summary(self._records, self.selected_day)

    def available_count(self) -> int | None:
        """Number of matching entries when a date or time filter is set."""
        if self.criteria.on_date is None and self.criteria.at_time is None:
            return None
        return len(self.filtered())

"""Tests for the calendar activity projector."""

from datetime import date, timedelta

import pytest

from availability_core.models import AvailabilityRecord
from availability_core.projection import (
    active_days,
    active_on,
    count_people,
    day_summary,
    group_by_person,
    is_active_on,
    month_grid,
)


def _rec(rid, **kw):
    kw.setdefault("start_date", date(2025, 1, 6))
    kw.setdefault("locations", ("Berlin",))
    return AvailabilityRecord(id=rid, **kw)


class TestScenarios:
    def test_single_day_entry(self):
        rec = _rec(
            "a",
            start_date=date(2025, 1, 6),
            end_date=date(2025, 1, 6),
            shift_type="earlyShift",
        )
        assert active_on([rec], date(2025, 1, 6)) == [rec]
        assert active_on([rec], date(2025, 1, 7)) == []

    def test_weekend_recurrence(self):
        rec = _rec(
            "b",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 31),
            is_recurring=True,
            weekdays=frozenset({"saturday", "sunday"}),
            locations=("Köln",),
        )
        assert active_on([rec], date(2025, 1, 4)) == [rec]
        assert active_on([rec], date(2025, 1, 6)) == []


class TestRangeBoundary:
    def test_only_the_day_itself(self):
        d = date(2025, 5, 15)
        rec = _rec("x", start_date=d, end_date=d)
        assert is_active_on(rec, d)
        assert not is_active_on(rec, d - timedelta(days=1))
        assert not is_active_on(rec, d + timedelta(days=1))

    def test_missing_end_date_is_single_day(self):
        d = date(2025, 5, 15)
        rec = _rec("x", start_date=d)
        assert is_active_on(rec, d)
        assert not is_active_on(rec, d + timedelta(days=1))

    def test_reversed_range_clamps_to_start(self):
        rec = _rec("x", start_date=date(2025, 5, 15), end_date=date(2025, 5, 10))
        assert is_active_on(rec, date(2025, 5, 15))
        assert not is_active_on(rec, date(2025, 5, 12))

    def test_reversed_recurring_range_clamps_to_start(self):
        # 2025-05-15 is a Thursday
        rec = _rec(
            "x",
            start_date=date(2025, 5, 15),
            end_date=date(2025, 5, 1),
            is_recurring=True,
            weekdays=frozenset({"thursday"}),
        )
        assert active_on([rec], date(2025, 5, 15)) == [rec]
        assert active_on([rec], date(2025, 5, 8)) == []

    def test_missing_start_never_active(self):
        rec = _rec("x", start_date=None, end_date=date(2025, 5, 10))
        assert not is_active_on(rec, date(2025, 5, 10))

    def test_missing_locations_never_active(self):
        rec = _rec("nl", start_date=date(2025, 1, 6), locations=())
        assert active_on([rec], date(2025, 1, 6)) == []
        assert list(active_days(rec, date(2025, 1, 1), date(2025, 1, 31))) == []
        cells = {c.day: c for w in month_grid([rec], 2025, 1) for c in w if c is not None}
        assert cells[date(2025, 1, 6)].people == 0


class TestRecurrenceGating:
    def test_mondays_only(self):
        d1 = date(2025, 1, 1)
        rec = _rec(
            "m",
            start_date=d1,
            end_date=d1 + timedelta(days=30),
            is_recurring=True,
            weekdays=frozenset({"monday"}),
        )
        for offset in range(-7, 38):
            day = d1 + timedelta(days=offset)
            in_range = 0 <= offset <= 30
            assert is_active_on(rec, day) == (in_range and day.weekday() == 0), day

    def test_empty_weekdays_never_active(self):
        rec = _rec(
            "e",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 31),
            is_recurring=True,
        )
        assert all(not is_active_on(rec, date(2025, 1, d)) for d in range(1, 32))

    def test_weekdays_ignored_when_not_recurring(self):
        rec = _rec(
            "n",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 3),
            weekdays=frozenset({"monday"}),
        )
        assert is_active_on(rec, date(2025, 1, 2))

    def test_active_days(self):
        rec = _rec(
            "m",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 31),
            is_recurring=True,
            weekdays=frozenset({"monday"}),
        )
        days = list(active_days(rec, date(2024, 12, 1), date(2025, 3, 1)))
        assert days == [date(2025, 1, 6), date(2025, 1, 13), date(2025, 1, 20), date(2025, 1, 27)]

    def test_active_on_is_repeatable(self):
        recs = [_rec(str(i), start_date=date(2025, 1, i)) for i in range(1, 6)]
        day = date(2025, 1, 3)
        assert active_on(recs, day) == active_on(recs, day)


class TestGrouping:
    def test_group_by_person(self):
        recs = [
            _rec("1", first_name="Ana", last_name="Müller"),
            _rec("2", first_name="Bob", last_name="Smith"),
            _rec("3", first_name="Ana", last_name="Müller"),
        ]
        grouped = group_by_person(recs)
        assert list(grouped) == ["Ana Müller", "Bob Smith"]
        assert [r.id for r in grouped["Ana Müller"]] == ["1", "3"]
        assert count_people(recs) == 2

    def test_day_summary(self):
        recs = [
            _rec("1", first_name="Ana", last_name="Müller"),
            _rec("2", first_name="Ana", last_name="Müller", locations=("Köln",)),
            _rec("3", first_name="Bob", last_name="Smith", start_date=date(2025, 1, 7)),
        ]
        summary = day_summary(recs, date(2025, 1, 6))
        assert summary.people == 1
        assert [r.id for r in summary.entries] == ["1", "2"]
        assert summary.has_entries


class TestMonthGrid:
    def test_january_2025_layout(self):
        # 2025-01-01 is a Wednesday: two padding cells before it.
        weeks = month_grid([], 2025, 1)
        assert all(len(w) == 7 for w in weeks)
        assert weeks[0][:2] == [None, None]
        assert weeks[0][2].day == date(2025, 1, 1)
        days = [c.day for w in weeks for c in w if c is not None]
        assert days[0] == date(2025, 1, 1)
        assert days[-1] == date(2025, 1, 31)
        assert len(days) == 31

    def test_counts_per_cell(self):
        rec = _rec(
            "w",
            first_name="Ana",
            last_name="Müller",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 31),
            is_recurring=True,
            weekdays=frozenset({"saturday"}),
        )
        cells = {c.day: c for w in month_grid([rec], 2025, 1) for c in w if c is not None}
        assert cells[date(2025, 1, 4)].people == 1
        assert cells[date(2025, 1, 5)].people == 0

    def test_bad_month(self):
        with pytest.raises(ValueError):
            month_grid([], 2025, 13)

"""Tests for io.schemas helpers."""

from availability_core.io.schemas import (
    join_labels,
    split_labels,
    to_bool,
    to_str_or_none,
)


class TestLabelHelpers:
    def test_split_basic(self):
        assert split_labels("Köln,Essen,Düsseldorf") == ("Köln", "Essen", "Düsseldorf")

    def test_split_trims_and_drops_empty(self):
        assert split_labels(" Köln , ,Essen,") == ("Köln", "Essen")

    def test_split_dedupes(self):
        assert split_labels("Köln, köln, KÖLN") == ("Köln",)

    def test_split_empty(self):
        assert split_labels("") == ()
        assert split_labels(None) == ()

    def test_split_accepts_list(self):
        assert split_labels(["Berlin ", "Berlin"]) == ("Berlin",)

    def test_join(self):
        assert join_labels(["Köln", "Essen"]) == "Köln, Essen"
        assert join_labels(["monday", "friday"], sep=",") == "monday,friday"

    def test_join_empty(self):
        assert join_labels([]) == ""
        assert join_labels(None) == ""


class TestTypeCoercion:
    def test_to_str_or_none(self):
        assert to_str_or_none("  x ") == "x"
        assert to_str_or_none("   ") is None
        assert to_str_or_none(None) is None
        assert to_str_or_none(42) == "42"

    def test_to_bool(self):
        assert to_bool(True) is True
        assert to_bool("true") is True
        assert to_bool("1") is True
        assert to_bool("yes") is True
        assert to_bool("FALSE") is False
        assert to_bool("") is False
        assert to_bool(None) is False

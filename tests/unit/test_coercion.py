"""Unit tests for per-field coercion (services/roster/coercion.py)."""
from __future__ import annotations

from datetime import date

import pytest

from src.app.models.enums import TraineeStatus
from src.app.services.roster.coercion import coerce_field, parse_date
from src.app.services.roster.fields import CanonicalFieldKey


# ---------------------------------------------------------------------------
# parse_date
# ---------------------------------------------------------------------------


class TestParseDate:

    def test_iso(self):
        assert parse_date("1990-06-15") == date(1990, 6, 15)

    def test_us_slashes(self):
        assert parse_date("12/9/1985") == date(1985, 12, 9)

    def test_us_is_month_first(self):
        assert parse_date("03/04/2001") == date(2001, 3, 4)

    def test_generic_fallback(self):
        assert parse_date("June 15, 1990") == date(1990, 6, 15)

    def test_partial_dates_fill_from_january_first(self):
        assert parse_date("1990") == date(1990, 1, 1)
        assert parse_date("June 1990") == date(1990, 6, 1)

    def test_impossible_iso_date(self):
        assert parse_date("2024-02-30") is None

    def test_impossible_us_date_is_not_reinterpreted(self):
        assert parse_date("02/30/1990") is None
        assert parse_date("13/01/1990") is None

    def test_garbage(self):
        assert parse_date("not a date") is None

    def test_blank(self):
        assert parse_date("   ") is None


# ---------------------------------------------------------------------------
# coerce_field
# ---------------------------------------------------------------------------


class TestCoerceField:

    @pytest.mark.parametrize("raw", [None, "", "   ", "\t"])
    def test_empty_cells_are_omitted(self, raw):
        assert coerce_field(CanonicalFieldKey.FIRST_NAME, raw) is None

    def test_text_is_trimmed(self):
        assert coerce_field(CanonicalFieldKey.CITY, "  Springfield ") == "Springfield"

    def test_ssn_stays_text(self):
        assert coerce_field(CanonicalFieldKey.SSN, "123-45-6789") == "123-45-6789"

    def test_date_field(self):
        assert coerce_field(CanonicalFieldKey.DATE_OF_BIRTH, "1990-06-15") == date(1990, 6, 15)

    def test_unparseable_date_is_omitted(self):
        assert coerce_field(CanonicalFieldKey.DATE_OF_BIRTH, "someday") is None

    @pytest.mark.parametrize("raw,expected", [("42", 42), ("42.0", 42), ("0", 0)])
    def test_age(self, raw, expected):
        assert coerce_field(CanonicalFieldKey.AGE, raw) == expected

    @pytest.mark.parametrize("raw", ["-3", "forty", "nan?"])
    def test_bad_age_is_omitted(self, raw):
        assert coerce_field(CanonicalFieldKey.AGE, raw) is None

    def test_status_case_insensitive(self):
        assert coerce_field(CanonicalFieldKey.STATUS, " Inactive ") is TraineeStatus.INACTIVE

    def test_unknown_status_is_omitted(self):
        assert coerce_field(CanonicalFieldKey.STATUS, "retired") is None

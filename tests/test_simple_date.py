#!/usr/bin/env python3
"""Tests for SimpleDate and the coarse calendar."""

import pytest

from fleet import InvalidDateError, SimpleDate, UNSET


class TestValidity:
    """Structural date checks."""

    def test_valid_date(self):
        assert SimpleDate(15, 3, 2025).is_valid

    def test_day_31_accepted_for_any_month(self):
        """No month-length check: 31/02 is structurally valid."""
        assert SimpleDate(31, 2, 2025).is_valid

    @pytest.mark.parametrize(
        "day,month,year",
        [(0, 1, 2025), (32, 1, 2025), (1, 0, 2025), (1, 13, 2025), (1, 1, 0)],
    )
    def test_invalid_dates(self, day, month, year):
        assert not SimpleDate(day, month, year).is_valid

    def test_unset(self):
        assert UNSET == SimpleDate(0, 0, 0)
        assert UNSET.is_set is False
        assert UNSET.is_valid is False


class TestDayCount:
    """Linear day count: year*365 + month*30 + day."""

    def test_to_days(self):
        assert SimpleDate(1, 1, 2025).to_days() == 2025 * 365 + 30 + 1

    def test_add_days(self):
        """180 days after 01/01/2025 lands on 01/07/2025."""
        assert SimpleDate(1, 1, 2025).add_days(180) == SimpleDate(1, 7, 2025)

    def test_add_days_rolls_year(self):
        """Remainder 30 gives month 1, day 0 clamped to 1."""
        assert SimpleDate(25, 12, 2024).add_days(10) == SimpleDate(1, 1, 2025)

    def test_from_days_clamps_month_and_day(self):
        assert SimpleDate.from_days(2025 * 365) == SimpleDate(1, 1, 2025)
        assert SimpleDate.from_days(2025 * 365 + 15) == SimpleDate(15, 1, 2025)


class TestParseAndFormat:
    """dd/mm/yyyy input and DD-MM-YYYY output."""

    def test_parse(self):
        assert SimpleDate.parse("5/3/2025") == SimpleDate(5, 3, 2025)
        assert SimpleDate.parse(" 05/03/2025 ") == SimpleDate(5, 3, 2025)

    @pytest.mark.parametrize("text", ["", "2025-03-05", "5/3", "32/1/2025", "a/b/c"])
    def test_parse_rejects_bad_input(self, text):
        with pytest.raises(InvalidDateError):
            SimpleDate.parse(text)

    def test_format(self):
        assert SimpleDate(5, 3, 2025).format() == "05-03-2025"
        assert str(SimpleDate(5, 3, 2025)) == "05-03-2025"

    def test_validated(self):
        with pytest.raises(InvalidDateError):
            SimpleDate.validated(1, 13, 2025)
        assert SimpleDate.validated(1, 12, 2025) == SimpleDate(1, 12, 2025)

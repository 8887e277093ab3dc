#!/usr/bin/env python3
"""Tests for FinancialDate primitive type."""

from datetime import date, datetime

import pytest

from reconciler.core.dates import FinancialDate


class TestFinancialDateConstruction:
    """Test FinancialDate construction."""

    @pytest.mark.parametrize(
        "value,expected_date",
        [
            ("2024-01-15", date(2024, 1, 15)),
            ("2024-01-15T10:30:00Z", date(2024, 1, 15)),
            (date(2024, 1, 15), date(2024, 1, 15)),
            (datetime(2024, 1, 15, 23, 59), date(2024, 1, 15)),
            (FinancialDate(date=date(2024, 1, 15)), date(2024, 1, 15)),
        ],
        ids=["iso_string", "iso_with_time", "date", "datetime", "financial_date"],
    )
    def test_coerce(self, value, expected_date):
        """Test coercion from the shapes loaders hand over."""
        assert FinancialDate.coerce(value).date == expected_date

    @pytest.mark.parametrize("bad_value", ["", "   ", "15/01/2024", None, 20240115])
    def test_coerce_rejects_non_dates(self, bad_value):
        """Test unreadable dates raise ValueError."""
        with pytest.raises(ValueError):
            FinancialDate.coerce(bad_value)

    def test_from_string_custom_format(self):
        """Test parsing with an explicit format."""
        fd = FinancialDate.from_string("01/15/2024", format="%m/%d/%Y")
        assert fd.date == date(2024, 1, 15)

    def test_today(self):
        """Test creating today's date."""
        assert FinancialDate.today().date == date.today()


class TestFinancialDateCalculations:
    """Test FinancialDate day arithmetic."""

    def test_days_until_is_signed(self):
        """Test signed distance between dates."""
        earlier = FinancialDate.from_string("2024-01-10")
        later = FinancialDate.from_string("2024-01-15")

        assert earlier.days_until(later) == 5
        assert later.days_until(earlier) == -5

    def test_days_between_is_absolute(self):
        """Test absolute distance between dates."""
        earlier = FinancialDate.from_string("2023-12-30")
        later = FinancialDate.from_string("2024-01-02")

        assert earlier.days_between(later) == 3
        assert later.days_between(earlier) == 3

    def test_ordering_and_formatting(self):
        """Test ordering and ISO display."""
        d1 = FinancialDate.from_string("2024-01-15")
        d2 = FinancialDate.from_string("2024-01-16")

        assert d1 < d2
        assert str(d1) == "2024-01-15"
        assert d1.to_iso_string() == "2024-01-15"

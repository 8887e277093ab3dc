#!/usr/bin/env python3
"""
FinancialDate Primitive Type

Immutable calendar date (no time component) shared by ledger transactions and orders.
"""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True, order=True)
class FinancialDate:
    """Immutable financial date wrapper with consistent formatting."""

    date: date

    @classmethod
    def from_string(cls, date_str: str, format: str = "%Y-%m-%d") -> "FinancialDate":
        """
        Parse from string in specified format.

        Args:
            date_str: Date string to parse
            format: Date format (default: ISO format "%Y-%m-%d")

        Returns:
            FinancialDate object
        """
        return cls(date=datetime.strptime(date_str.strip(), format).date())

    @classmethod
    def coerce(cls, value: "FinancialDate | date | datetime | str") -> "FinancialDate":
        """
        Build a FinancialDate from the assorted date shapes loaders hand over.

        Accepts ISO strings (a trailing time component is ignored), date and
        datetime objects (including pandas Timestamps).

        Raises:
            ValueError: If the value is empty or not a recognizable date
        """
        if isinstance(value, FinancialDate):
            return value
        if isinstance(value, datetime):
            return cls(date=value.date())
        if isinstance(value, date):
            return cls(date=value)
        if isinstance(value, str) and value.strip():
            return cls.from_string(value.strip()[:10])
        raise ValueError(f"Not a date: {value!r}")

    @classmethod
    def today(cls) -> "FinancialDate":
        return cls(date=date.today())

    def to_iso_string(self) -> str:
        """Format as YYYY-MM-DD."""
        return self.date.isoformat()

    def days_until(self, other: "FinancialDate") -> int:
        """Signed number of days from this date to another (positive if other is later)."""
        return (other.date - self.date).days

    def days_between(self, other: "FinancialDate") -> int:
        """Absolute number of days between two dates."""
        return abs(self.days_until(other))

    def __str__(self) -> str:
        return self.to_iso_string()

    def __repr__(self) -> str:
        return f"FinancialDate(date={self.date!r})"

#!/usr/bin/env python3
"""
FinancialDate Primitive Type

Immutable date wrapper with consistent formatting for financial operations,
plus the calendar arithmetic the deposit and provident-fund records rely on:
month addition clamped to month end, and the April-March financial year.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone

from dateutil.relativedelta import relativedelta


@dataclass(frozen=True)
class FinancialDate:
    """Immutable financial date wrapper with consistent formatting."""

    date: date

    @classmethod
    def from_string(cls, date_str: str, date_format: str = "%Y-%m-%d") -> "FinancialDate":
        """
        Parse from string in specified format.

        ISO timestamps such as ``2024-01-31T00:00:00.000Z`` are accepted when
        the default format is used; only the date portion is kept.

        Args:
            date_str: Date string to parse
            date_format: Date format (default: ISO format "%Y-%m-%d")

        Returns:
            FinancialDate object
        """
        if date_format == "%Y-%m-%d" and "T" in date_str:
            date_str = date_str.split("T", 1)[0]
        return cls(date=datetime.strptime(date_str, date_format).date())

    @classmethod
    def today(cls) -> "FinancialDate":
        """Get today's date."""
        return cls(date=date.today())

    def add_months(self, months: int) -> "FinancialDate":
        """
        Add calendar months, clamping to the last day of the target month.

        Example:
            2024-01-31 + 1 month -> 2024-02-29
        """
        return FinancialDate(date=self.date + relativedelta(months=months))

    def add_years(self, years: int) -> "FinancialDate":
        """Add calendar years (Feb 29 clamps to Feb 28)."""
        return FinancialDate(date=self.date + relativedelta(years=years))

    def years_until(self, other: "FinancialDate") -> float:
        """Fractional years from this date to another, negative if other is earlier."""
        return (other.date - self.date).days / 365.25

    @property
    def fy_start_year(self) -> int:
        """Calendar year in which this date's financial year (April-March) starts."""
        return self.date.year if self.date.month >= 4 else self.date.year - 1

    def financial_year(self) -> str:
        """Financial year label in long form, e.g. ``2024-2025``."""
        start = self.fy_start_year
        return f"{start}-{start + 1}"

    def financial_year_short(self) -> str:
        """Financial year label in short form, e.g. ``2024-25``."""
        start = self.fy_start_year
        return f"{start}-{str(start + 1)[-2:]}"

    def month_key(self) -> str:
        """Month bucket key, e.g. ``2024-07``."""
        return f"{self.date.year}-{self.date.month:02d}"

    def to_iso_string(self) -> str:
        """Format as YYYY-MM-DD."""
        return self.date.isoformat()

    def age_days(self, other: "FinancialDate | None" = None) -> int:
        """
        Calculate days between this date and another (or today).

        Args:
            other: Other date to compare to (default: today)

        Returns:
            Number of days difference
        """
        if other is None:
            other = FinancialDate.today()
        return (other.date - self.date).days

    def __str__(self) -> str:
        """String representation."""
        return self.to_iso_string()

    def __lt__(self, other: "FinancialDate") -> bool:
        return self.date < other.date

    def __le__(self, other: "FinancialDate") -> bool:
        return self.date <= other.date

    def __gt__(self, other: "FinancialDate") -> bool:
        return self.date > other.date

    def __ge__(self, other: "FinancialDate") -> bool:
        return self.date >= other.date


def suggested_financial_years(start: FinancialDate, today: FinancialDate | None = None) -> list[str]:
    """
    List short-form financial years from the one containing ``start`` through
    the one following today's financial year.
    """
    today = today or FinancialDate.today()
    last_start_year = today.fy_start_year + 1
    return [
        f"{year}-{str(year + 1)[-2:]}"
        for year in range(start.fy_start_year, last_start_year + 1)
    ]


def now_iso() -> str:
    """Current timestamp in ISO-8601 with milliseconds and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

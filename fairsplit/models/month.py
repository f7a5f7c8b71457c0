"""
Month Keys

A month key is a plain (year, month) pair. Every recurrence decision in
the engine compares months through their integer ordinal, never through
timestamps.

DESIGN DECISION: Dates are reduced to their wall-clock fields the moment
they arrive. A datetime is never converted between timezones first, so an
expense recorded late on the last day of a month cannot drift into the
next one.
"""

import calendar
import re
from datetime import date
from functools import total_ordering
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


_MONTH_KEY_PATTERN = re.compile(r"^\s*(\d{4})-(\d{1,2})(?:-\d{1,2}(?:[T ]\S*)?)?\s*$")

# Month ordinals of 0001-01 and 9999-12
MIN_MONTH_INDEX = 12
MAX_MONTH_INDEX = 9999 * 12 + 11


@total_ordering
class YearMonth(BaseModel):
    """
    A calendar month.

    Renders as the canonical "YYYY-MM" key. Ordered chronologically.
    """
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)

    @classmethod
    def parse(cls, value: str) -> "YearMonth":
        """
        Parse a "YYYY-MM" key.

        Longer ISO strings ("YYYY-MM-DD", "YYYY-MM-DDTHH:MM") are truncated
        to their year and month.
        """
        match = _MONTH_KEY_PATTERN.match(value)
        if match is None:
            raise ValueError(f"Invalid month key: {value!r} (expected YYYY-MM)")
        return cls(year=int(match.group(1)), month=int(match.group(2)))

    @classmethod
    def from_date(cls, value: date) -> "YearMonth":
        """Month containing a date (or datetime, by its own wall clock)."""
        return cls(year=value.year, month=value.month)

    @classmethod
    def from_index(cls, index: int) -> "YearMonth":
        """
        Inverse of `index`.

        Raises:
            ValueError: The ordinal falls outside years 1 to 9999.
        """
        if not MIN_MONTH_INDEX <= index <= MAX_MONTH_INDEX:
            raise ValueError(
                f"Month ordinal {index} is outside the supported calendar (0001-01 to 9999-12)"
            )
        year, month_zero = divmod(index, 12)
        return cls(year=year, month=month_zero + 1)

    @classmethod
    def coerce(cls, value: "MonthLike") -> "YearMonth":
        """Accept a YearMonth, a date/datetime or a "YYYY-MM" string."""
        if isinstance(value, YearMonth):
            return value
        if isinstance(value, date):
            return cls.from_date(value)
        if isinstance(value, str):
            return cls.parse(value)
        raise TypeError(f"Cannot interpret {type(value).__name__} as a month")

    @classmethod
    def current(cls) -> "YearMonth":
        return cls.from_date(date.today())

    @property
    def index(self) -> int:
        """Months elapsed since year 0. Consecutive months differ by one."""
        return self.year * 12 + (self.month - 1)

    @property
    def label(self) -> str:
        """Short display label, e.g. "Oct 23"."""
        return f"{calendar.month_abbr[self.month]} {self.year % 100:02d}"

    def shift(self, months: int) -> "YearMonth":
        """Month that lies `months` away (negative goes back)."""
        return YearMonth.from_index(self.index + months)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return self.index < other.index

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


MonthLike = Union[YearMonth, date, str]

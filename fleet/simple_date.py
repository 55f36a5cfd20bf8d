"""SimpleDate - day/month/year triple with a coarse 30-day-month calendar.

The linear day count (year*365 + month*30 + day) is a fixed approximation
used throughout the maintenance calculations. Due dates computed with it are
part of the persisted data, so it must not be swapped for a real calendar.
"""

import re
from dataclasses import dataclass
from datetime import date

from .errors import InvalidDateError

DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30

_DATE_INPUT = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{1,4})\s*$")


@dataclass(frozen=True)
class SimpleDate:
    """A calendar date without month-length or leap-year checks."""

    day: int
    month: int
    year: int

    @property
    def is_valid(self) -> bool:
        """Structural check only: year > 0, month 1-12, day 1-31."""
        return self.year > 0 and 1 <= self.month <= 12 and 1 <= self.day <= 31

    @property
    def is_set(self) -> bool:
        return self.year > 0

    def to_days(self) -> int:
        """Linear day count."""
        return self.year * DAYS_PER_YEAR + self.month * DAYS_PER_MONTH + self.day

    @classmethod
    def from_days(cls, total: int) -> "SimpleDate":
        """Inverse of to_days; month and day are clamped to at least 1."""
        year = total // DAYS_PER_YEAR
        rem = total % DAYS_PER_YEAR
        month = rem // DAYS_PER_MONTH or 1
        day = rem % DAYS_PER_MONTH or 1
        return cls(day, month, year)

    def add_days(self, days: int) -> "SimpleDate":
        return SimpleDate.from_days(self.to_days() + days)

    def format(self) -> str:
        """Format as DD-MM-YYYY."""
        return f"{self.day:02d}-{self.month:02d}-{self.year:04d}"

    def __str__(self) -> str:
        return self.format()

    @classmethod
    def parse(cls, text: str) -> "SimpleDate":
        """Parse dd/mm/yyyy, raising InvalidDateError when malformed."""
        match = _DATE_INPUT.match(text or "")
        if not match:
            raise InvalidDateError(
                f"Invalid date '{text}'. Use format dd/mm/yyyy with valid values."
            )
        day, month, year = (int(part) for part in match.groups())
        return cls.validated(day, month, year)

    @classmethod
    def validated(cls, day: int, month: int, year: int) -> "SimpleDate":
        d = cls(day, month, year)
        if not d.is_valid:
            raise InvalidDateError(f"Invalid date {day}/{month}/{year}")
        return d

    @classmethod
    def today(cls) -> "SimpleDate":
        now = date.today()
        return cls(now.day, now.month, now.year)


UNSET = SimpleDate(0, 0, 0)

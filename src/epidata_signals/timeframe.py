"""Immutable date ranges."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

from epidata_signals.dates import EpiWeek, format_api_time
from epidata_signals.series import row_date

if TYPE_CHECKING:
    from collections.abc import Callable

#: First day of data in the all-time frame.
ALL_TIME_START = date(2020, 1, 1)


@dataclass(frozen=True)
class TimeFrame:
    """Inclusive ``[min, max]`` date range, optionally paired with epi weeks."""

    min: date
    max: date
    min_week: EpiWeek | None = None
    max_week: EpiWeek | None = None

    def __post_init__(self) -> None:
        if self.min > self.max:
            msg = f"TimeFrame min {self.min} is after max {self.max}"
            raise ValueError(msg)
        if self.min_week is None:
            object.__setattr__(self, "min_week", EpiWeek.from_date(self.min))
        if self.max_week is None:
            object.__setattr__(self, "max_week", EpiWeek.from_date(self.max))

    @property
    def range(self) -> str:
        """API range selector, e.g. ``20200101-20200131``."""
        return f"{format_api_time(self.min)}-{format_api_time(self.max)}"

    @property
    def week_range(self) -> str:
        """API range selector in weeks, e.g. ``202001-202005``."""
        return f"{self.min_week}-{self.max_week}"

    @property
    def days(self) -> int:
        """Number of days covered (inclusive)."""
        return (self.max - self.min).days + 1

    def includes(self, d: date) -> bool:
        return self.min <= d <= self.max

    def filter(self, row: Any) -> bool:
        """Predicate: does the row's date fall inside this frame?"""
        return self.includes(row_date(row))

    def overlaps(self, other: TimeFrame) -> bool:
        return self.min <= other.max and other.min <= self.max

    def shift(self, days: int) -> TimeFrame:
        """New frame moved by ``days``."""
        delta = timedelta(days=days)
        return TimeFrame(self.min + delta, self.max + delta)

    @classmethod
    def compute(
        cls,
        reference: date,
        offset: Callable[[date, int], date],
        size: int,
    ) -> TimeFrame:
        """Window ending at ``reference`` and reaching ``size`` steps back.

        Args:
            reference: Last day of the window.
            offset: Calendar step function, e.g. ``dates.offset_weeks``.
            size: Number of steps to go back.
        """
        return cls(offset(reference, -size), reference)

    @classmethod
    def all(cls, today: date | None = None) -> TimeFrame:
        """Frame from the start of data collection through today."""
        return cls(ALL_TIME_START, today or date.today())

    def __str__(self) -> str:
        return self.range

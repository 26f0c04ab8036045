"""Date codecs for the Epidata API.

The API encodes days as ``YYYYMMDD`` integers and epidemiological weeks as
``YYYYWW`` integers. Epi weeks follow the CDC MMWR convention:

    - weeks run Sunday through Saturday
    - week 1 is the first week with at least four days in the calendar year
    - a year therefore has 52 or 53 weeks, and Jan 1-3 may belong to the
      last week of the previous year

Everything here is pure; malformed input raises ``MalformedDate``.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Literal

from epidata_signals.exceptions import MalformedDate

TimeType = Literal["day", "week"]


# =============================================================================
# Days (YYYYMMDD)
# =============================================================================


def format_api_time(d: date | datetime) -> int:
    """Encode a calendar date as ``YYYYMMDD``; time-of-day is discarded.

    >>> format_api_time(date(2020, 2, 2))
    20200202
    """
    _check_year(d.year)
    return d.year * 10000 + d.month * 100 + d.day


def _check_year(year: int) -> None:
    # codes carry exactly four year digits
    if not 1000 <= year <= 9999:
        msg = f"Year {year} cannot be encoded as a four-digit API code"
        raise MalformedDate(msg)


def _digits(code: int | str, width: int) -> str:
    if isinstance(code, bool):
        msg = f"Expected a {width}-digit code, got {code!r}"
        raise MalformedDate(msg)
    text = str(code).strip()
    if len(text) != width or not (text.isascii() and text.isdigit()):
        msg = f"Expected a {width}-digit code, got {code!r}"
        raise MalformedDate(msg)
    return text


def parse_api_time(code: int | str) -> date:
    """Decode a ``YYYYMMDD`` code (int or str) into a ``date``.

    Raises:
        MalformedDate: If the code is not 8 digits or is not a real date.
    """
    text = _digits(code, 8)
    try:
        return date(int(text[:4]), int(text[4:6]), int(text[6:]))
    except ValueError as exc:
        msg = f"Invalid calendar date: {code!r}"
        raise MalformedDate(msg) from exc


# =============================================================================
# Epi weeks (YYYYWW)
# =============================================================================


def _epi_year_start(year: int) -> date:
    """Sunday that starts epi week 1 of ``year``."""
    jan1 = date(year, 1, 1)
    sunday_offset = (jan1.weekday() + 1) % 7  # Sunday = 0
    if sunday_offset <= 3:
        return jan1 - timedelta(days=sunday_offset)
    return jan1 + timedelta(days=7 - sunday_offset)


def weeks_in_epi_year(year: int) -> int:
    """Number of epi weeks (52 or 53) in ``year``."""
    return (_epi_year_start(year + 1) - _epi_year_start(year)).days // 7


@dataclass(frozen=True, order=True)
class EpiWeek:
    """A CDC epidemiological week."""

    year: int
    week: int

    def __post_init__(self) -> None:
        if not 1 <= self.week <= weeks_in_epi_year(self.year):
            msg = f"Epi week {self.week} out of range for {self.year}"
            raise MalformedDate(msg)

    @classmethod
    def from_date(cls, d: date | datetime) -> EpiWeek:
        """Epi week containing the given day."""
        if isinstance(d, datetime):
            d = d.date()
        year = d.year
        if d < _epi_year_start(year):
            year -= 1
        elif d >= _epi_year_start(year + 1):
            year += 1
        week = (d - _epi_year_start(year)).days // 7 + 1
        return cls(year, week)

    @classmethod
    def parse(cls, code: int | str) -> EpiWeek:
        """Decode a ``YYYYWW`` code."""
        text = _digits(code, 6)
        return cls(int(text[:4]), int(text[4:]))

    def format(self) -> int:
        """Encode as ``YYYYWW``."""
        _check_year(self.year)
        return self.year * 100 + self.week

    def start_date(self) -> date:
        """Sunday that starts this week."""
        return _epi_year_start(self.year) + timedelta(weeks=self.week - 1)

    def end_date(self) -> date:
        """Saturday that ends this week."""
        return self.start_date() + timedelta(days=6)

    def shift(self, weeks: int) -> EpiWeek:
        """Week ``weeks`` away (negative to go back)."""
        return EpiWeek.from_date(self.start_date() + timedelta(weeks=weeks))

    def __str__(self) -> str:
        return str(self.format())


def parse_api_week(code: int | str) -> date:
    """Decode a ``YYYYWW`` code into the Sunday starting that week."""
    return EpiWeek.parse(code).start_date()


def format_api_week(d: date | datetime) -> int:
    """Encode the epi week containing ``d`` as ``YYYYWW``."""
    return EpiWeek.from_date(d).format()


def parse_api_date_and_week(
    code: int | str,
    time_type: TimeType | None = None,
) -> tuple[date, EpiWeek | None]:
    """Decode a metadata time field that may be a day or a week.

    Args:
        code: ``YYYYMMDD`` or ``YYYYWW`` value.
        time_type: ``"day"`` or ``"week"`` from the signal metadata. When
            omitted it is detected from the digit count (8 vs 6).

    Returns:
        ``(date, week)``; for day codes ``week`` is None, for week codes
        ``date`` is the first day of the week.
    """
    if time_type is None:
        time_type = "week" if len(str(code).strip()) == 6 else "day"
    if time_type == "week":
        week = EpiWeek.parse(code)
        return week.start_date(), week
    if time_type == "day":
        return parse_api_time(code), None
    msg = f"Unknown time type: {time_type!r}"
    raise MalformedDate(msg)


# =============================================================================
# Calendar offsets (used for sliding windows)
# =============================================================================


def offset_days(d: date, step: int) -> date:
    return d + timedelta(days=step)


def offset_weeks(d: date, step: int) -> date:
    return d + timedelta(weeks=step)


def offset_months(d: date, step: int) -> date:
    """Move ``step`` calendar months, clamping the day to the month's length."""
    month_index = d.year * 12 + (d.month - 1) + step
    year, month = divmod(month_index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)

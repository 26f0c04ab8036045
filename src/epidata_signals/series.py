"""Date-indexed series helpers shared by the client and the analysis layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

from epidata_signals.dates import (
    TimeType,
    format_api_time,
    format_api_week,
    parse_api_date_and_week,
)
from epidata_signals.schemas import EpiDataJSONRow

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@dataclass(frozen=True)
class Observation:
    """One ``(date, value)`` point of a time series."""

    date: date
    value: float | None


def row_date(row: Any) -> date:
    """Calendar date of a point (start of the week for weekly rows).

    Accepts anything with a ``date`` (e.g. ``Observation``) or with a
    ``time_value`` and optional ``time_type`` (e.g. ``EpiDataJSONRow``).

    Raises:
        ValueError: If the point carries neither.
    """
    d = getattr(row, "date", None)
    if isinstance(d, date):
        return d
    time_value = getattr(row, "time_value", None)
    if time_value is None:
        msg = "Row has no date or time_value"
        raise ValueError(msg)
    day, _ = parse_api_date_and_week(time_value, getattr(row, "time_type", None))
    return day


def observations_from_rows(rows: Iterable[EpiDataJSONRow]) -> list[Observation]:
    """Convert API rows into observations, sorted by date."""
    return sorted(
        (Observation(date=row_date(r), value=r.value) for r in rows),
        key=lambda o: o.date,
    )


def _encode(d: date, time_type: TimeType) -> int:
    return format_api_week(d) if time_type == "week" else format_api_time(d)


def _step(time_type: TimeType) -> timedelta:
    return timedelta(weeks=1) if time_type == "week" else timedelta(days=1)


def _placeholder(
    template: EpiDataJSONRow | None, d: date, time_type: TimeType
) -> EpiDataJSONRow:
    update = {
        "time_type": time_type,
        "time_value": _encode(d, time_type),
        "value": None,
        "stderr": None,
        "sample_size": None,
    }
    if template is None:
        return EpiDataJSONRow(**update)
    return template.model_copy(update=update)


def add_missing(
    rows: Sequence[EpiDataJSONRow], time_type: TimeType = "day"
) -> list[EpiDataJSONRow]:
    """Fill gaps between rows with placeholder rows whose value is None.

    Placeholders copy the identifying columns (source, signal, geo) of the
    preceding row. Output is sorted by date.
    """
    if not rows:
        return []
    ordered = sorted(rows, key=row_date)
    step = _step(time_type)
    filled: list[EpiDataJSONRow] = [ordered[0]]
    for row in ordered[1:]:
        prev = filled[-1]
        current = row_date(prev) + step
        target = row_date(row)
        while current < target:
            filled.append(_placeholder(prev, current, time_type))
            current += step
        filled.append(row)
    return filled


def fit_range(
    rows: Sequence[EpiDataJSONRow],
    start: date,
    end: date,
    time_type: TimeType = "day",
) -> list[EpiDataJSONRow]:
    """Trim rows to ``[start, end]`` and pad both ends with placeholders."""
    step = _step(time_type)
    inside = [r for r in sorted(rows, key=row_date) if start <= row_date(r) <= end]
    template = inside[0] if inside else None

    head: list[EpiDataJSONRow] = []
    current = start
    first = row_date(inside[0]) if inside else end + step
    while current < first and current <= end:
        head.append(_placeholder(template, current, time_type))
        current += step

    tail: list[EpiDataJSONRow] = []
    if inside:
        current = row_date(inside[-1]) + step
        while current <= end:
            tail.append(_placeholder(inside[-1], current, time_type))
            current += step

    return head + inside + tail

"""Sensor catalog records and the presentation lookup tables."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import date

    from epidata_signals.schemas import EpiDataMetaInfo, Link
    from epidata_signals.timeframe import TimeFrame

# =============================================================================
# Lookup tables (keyed by signal ``format`` / ``high_values_are``)
# =============================================================================

UNITS: dict[str, str] = {
    "raw": "arbitrary scale",
    "count": "people",
    "percent": "per 100 people",
    "fraction": "per 100 people",
    "per100k": "per 100,000 people",
}

UNITS_SHORT: dict[str, str] = {
    "percent": "per 100",
    "per100k": "per 100k",
}

Y_AXIS: dict[str, str] = {
    "raw": "arbitrary scale",
    "count": "Count",
    "percent": "Percentage",
    "fraction": "Percentage",
    "per100k": "per 100,000 people",
}

#: d3-format specifiers; the actual formatter is supplied by the consumer.
FORMAT_SPECIFIERS: dict[str, str] = {
    "raw": ",.2f",
    "count": ",.0f",
    "percent": ".2f",
    "fraction": ".2f",
    "per100k": ",.2f",
}

#: d3 interpolator names for sequential color scales.
COLOR_SCALES: dict[str, str] = {
    "bad": "interpolateYlOrRd",
    "good": "interpolateGreens",
    "neutral": "interpolateBlues",
}

#: Vega scheme names matching ``COLOR_SCALES``.
VEGA_COLOR_SCALES: dict[str, str] = {
    "bad": "yelloworangered",
    "good": "greens",
    "neutral": "blues",
}

VALUE_SCALE_FACTORS: dict[str, float] = {"fraction": 100}

_COUNT_SIGNAL = re.compile(r"(^|_)(count|num)(_|$)")
_CASES_SIGNAL = re.compile(r"^(jhu-csse|usa-facts|indicator-combination)-confirmed_")


def to_key(source: str, signal: str) -> str:
    """Catalog key of a signal: ``{source}-{signal}``."""
    return f"{source}-{signal}"


def is_count_signal(signal: str) -> bool:
    """Whether a signal counts people (``*_num``, ``*_count``) rather than a rate."""
    return bool(_COUNT_SIGNAL.search(signal))


def is_cases_signal(key: str) -> bool:
    """Whether a sensor key is a confirmed-cases signal."""
    return bool(_CASES_SIGNAL.match(key))


# =============================================================================
# Records
# =============================================================================


class SensorLike(Protocol):
    """Anything naming a sensor by data source id and signal."""

    @property
    def id(self) -> str: ...

    @property
    def signal(self) -> str: ...


@dataclass(frozen=True)
class Sensor:
    """Catalog entry for one signal of one data source.

    ``raw_sensor_key`` points at the unsmoothed counterpart of a smoothed
    signal; resolve it through ``MetaDataManager.get_sensor``.
    """

    key: str
    id: str
    signal: str
    name: str
    active: bool
    description: str
    signal_tooltip: str
    data_source_name: str
    type: str
    format: str
    high_values_are: str
    value_scale_factor: float
    unit: str
    unit_short: str
    x_axis: str
    y_axis: str
    format_specifier: str
    color_scale: str
    vega_color_scale: str
    extended_color_scale: bool
    has_stderr: bool
    is_7day_average: bool
    is_weekly_signal: bool
    levels: tuple[str, ...]
    links: tuple[Link, ...]
    credits: str
    time_frame: TimeFrame
    max_issue: date
    meta: EpiDataMetaInfo = field(repr=False)
    raw_sensor_key: str | None = None
    raw_signal: str | None = None

    @property
    def is_percentage(self) -> bool:
        return self.format in ("percent", "fraction")

    @property
    def is_per100k(self) -> bool:
        return self.format == "per100k"

    @property
    def is_count(self) -> bool:
        return is_count_signal(self.signal)


@dataclass(frozen=True)
class SensorSource:
    """A data provider and its sensors (sorted by signal insertion order)."""

    source: str
    name: str
    description: str
    credits: str
    sensors: tuple[Sensor, ...]
    links: tuple[Link, ...] = ()
    license: str | None = None
    dua: str | None = None
    db_source: str | None = None
    reference_sensor_key: str | None = None

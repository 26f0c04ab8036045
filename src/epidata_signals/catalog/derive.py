"""Derive the sensor catalog from raw source/signal descriptors.

Steps, per source and signal:

    1. parse min/max time and max issue into a TimeFrame
    2. key = "{source}-{signal}"; duplicates raise DuplicateSensorKey
    3. presentation metadata by ``format`` / ``high_values_are`` lookup
    4. extended color scale for confirmed-cases signals
    5. link every smoothed sensor to its raw counterpart in the same source
    6. sort sources by id and sensors by key; build the key lookup

No I/O: the input is the payload of ``call_source_meta_api``.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from epidata_signals.catalog.sensor import (
    COLOR_SCALES,
    FORMAT_SPECIFIERS,
    UNITS,
    UNITS_SHORT,
    VALUE_SCALE_FACTORS,
    VEGA_COLOR_SCALES,
    Y_AXIS,
    Sensor,
    SensorSource,
    is_cases_signal,
    to_key,
)
from epidata_signals.dates import parse_api_date_and_week
from epidata_signals.exceptions import DuplicateSensorKey
from epidata_signals.schemas import EpiDataMetaInfo, EpiDataMetaSourceInfo
from epidata_signals.timeframe import TimeFrame

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

logger = logging.getLogger(__name__)

DEFAULT_CREDITS = "We are happy for you to use this data in products and publications."

#: License short names with a canonical link.
KNOWN_LICENSES: dict[str, tuple[str, str]] = {
    "CC BY": (
        "Creative Commons Attribution license",
        "https://creativecommons.org/licenses/by/4.0/",
    ),
    "CC BY-NC": (
        "Creative Commons Attribution-NonCommercial license",
        "https://creativecommons.org/licenses/by-nc/4.0/",
    ),
    "CC0": (
        "Creative Commons CC0 public domain dedication",
        "https://creativecommons.org/publicdomain/zero/1.0/",
    ),
    "ODbL": (
        "Open Database License",
        "https://opendatacommons.org/licenses/odbl/",
    ),
}


@dataclass(frozen=True)
class Catalog:
    """Derived catalog: sorted sensors, sorted sources, and key lookup."""

    sensors: tuple[Sensor, ...]
    sources: tuple[SensorSource, ...]
    lookup: Mapping[str, Sensor]


def generate_credits(license_text: str | None) -> str:
    """Credit line for a source license."""
    if not license_text:
        return DEFAULT_CREDITS
    known = KNOWN_LICENSES.get(license_text)
    if known:
        name, link = known
        return (
            "We are happy for you to use this data in products and publications "
            f'under the terms of the <a href="{link}">{name}</a>.'
        )
    return license_text


def build_sensor(m: EpiDataMetaInfo, source: EpiDataMetaSourceInfo, credits: str) -> Sensor:
    """Build the catalog record of one signal (without its raw link)."""
    min_time, min_week = parse_api_date_and_week(m.min_time, m.time_type)
    max_time, max_week = parse_api_date_and_week(m.max_time, m.time_type)
    max_issue, _ = parse_api_date_and_week(m.max_issue)
    key = to_key(m.source, m.signal)
    fmt = m.format
    return Sensor(
        key=key,
        id=m.source,
        signal=m.signal,
        name=m.name or m.signal,
        active=m.active,
        description=(m.description or "").strip(),
        signal_tooltip=m.short_description or "",
        data_source_name=source.name,
        type=m.category or "other",
        format=fmt,
        high_values_are=m.high_values_are,
        value_scale_factor=VALUE_SCALE_FACTORS.get(fmt, 1),
        unit=UNITS.get(fmt, UNITS["raw"]),
        unit_short=UNITS_SHORT.get(fmt) or UNITS.get(fmt, UNITS["raw"]),
        x_axis=m.time_label,
        y_axis=m.value_label or Y_AXIS.get(fmt, Y_AXIS["raw"]),
        format_specifier=FORMAT_SPECIFIERS.get(fmt, FORMAT_SPECIFIERS["raw"]),
        color_scale=COLOR_SCALES[m.high_values_are],
        vega_color_scale=VEGA_COLOR_SCALES[m.high_values_are],
        extended_color_scale=is_cases_signal(key),
        has_stderr=m.has_stderr,
        is_7day_average=m.is_smoothed,
        is_weekly_signal=min_week is not None,
        levels=tuple(m.geo_types),
        links=tuple(source.link),
        credits=credits,
        time_frame=TimeFrame(min_time, max_time, min_week, max_week),
        max_issue=max_issue,
        meta=m,
    )


def find_raw_signal(sensor: Sensor, sensors: Iterable[Sensor]) -> Sensor | None:
    """Unsmoothed counterpart of a smoothed sensor, first match wins."""
    meta = sensor.meta
    if not meta.is_smoothed:
        return None
    for other in sensors:
        o = other.meta
        if (
            not o.is_smoothed
            and o.signal_basename == meta.signal_basename
            and o.is_cumulative == meta.is_cumulative
            and o.is_weighted == meta.is_weighted
            and o.format == meta.format
        ):
            return other
    return None


def _link_raw_sensors(sensors: list[Sensor]) -> list[Sensor]:
    linked: list[Sensor] = []
    for s in sensors:
        raw = find_raw_signal(s, sensors)
        if raw is None:
            linked.append(s)
            continue
        logger.debug("Linked smoothed %s to raw %s", s.key, raw.key)
        linked.append(dataclasses.replace(s, raw_sensor_key=raw.key, raw_signal=raw.signal))
    return linked


def derive_source(sm: EpiDataMetaSourceInfo, seen: set[str]) -> SensorSource:
    """Build one source with its linked sensors.

    Args:
        sm: Source descriptor.
        seen: Keys already used elsewhere in the payload; updated in place.

    Raises:
        DuplicateSensorKey: If a signal's key is already in ``seen``.
    """
    credits = generate_credits(sm.license)
    sensors: list[Sensor] = []
    for m in sm.signals:
        sensor = build_sensor(m, sm, credits)
        if sensor.key in seen:
            raise DuplicateSensorKey(sensor.key)
        seen.add(sensor.key)
        sensors.append(sensor)

    sensors = _link_raw_sensors(sensors)

    reference_key = None
    if sm.reference_signal:
        reference = next((s for s in sensors if s.signal == sm.reference_signal), None)
        reference_key = reference.key if reference else None

    return SensorSource(
        source=sm.source,
        name=sm.name,
        description=(sm.description or "").strip(),
        credits=credits,
        sensors=tuple(sensors),
        links=tuple(sm.link),
        license=sm.license,
        dua=sm.dua,
        db_source=sm.db_source,
        reference_sensor_key=reference_key,
    )


def derive_catalog(
    raw_sources: Sequence[EpiDataMetaSourceInfo | Mapping[str, Any]],
) -> Catalog:
    """
    Derive the sensor catalog from source descriptors.

    Args:
        raw_sources: Source descriptors, validated models or plain dicts as
            returned by the metadata endpoint.

    Returns:
        Catalog with sources sorted by id, sensors sorted by key, and a
        read-only key lookup over the sorted sensors.

    Raises:
        DuplicateSensorKey: If two signals derive the same key.
    """
    seen: set[str] = set()
    sources = [
        derive_source(EpiDataMetaSourceInfo.model_validate(sm), seen) for sm in raw_sources
    ]
    sources.sort(key=lambda s: s.source)

    sensors = [s for source in sources for s in source.sensors]
    sensors.sort(key=lambda s: s.key)
    lookup = MappingProxyType({s.key: s for s in sensors})

    logger.info("Derived catalog: %d sources, %d sensors", len(sources), len(sensors))
    return Catalog(sensors=tuple(sensors), sources=tuple(sources), lookup=lookup)

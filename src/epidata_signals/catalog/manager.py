"""Read-only index over a derived sensor catalog.

A ``MetaDataManager`` is built once from a metadata payload and never mutated;
when the metadata changes, build a new one. Pass it explicitly to whatever
needs it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from epidata_signals.catalog.derive import derive_catalog
from epidata_signals.catalog.sensor import Sensor, SensorSource, is_count_signal, to_key
from epidata_signals.exceptions import SensorNotFound
from epidata_signals.schemas import EpiDataMetaStatsInfo
from epidata_signals.timeframe import TimeFrame

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from epidata_signals.schemas import EpiDataMetaInfo, EpiDataMetaSourceInfo

#: Placeholder statistics for signals that publish none. Not a real statistic:
#: it only keeps color scales and domains renderable.
FALLBACK_STATS = EpiDataMetaStatsInfo(min=0, max=100, mean=50, stdev=10)

#: Lower bound of the value domain for count signals.
COUNT_SIGNAL_FLOOR = 0.14

DEFAULT_CASES_SIGNAL = ("jhu-csse", "confirmed_7dav_incidence_prop")
DEFAULT_DEATH_SIGNAL = ("jhu-csse", "deaths_7dav_incidence_prop")

#: Upper clamp of scaled domains by format.
_DOMAIN_CEILINGS: dict[str, float] = {
    "percent": 100,
    "fraction": 100,
    "per100k": 100_000,
}

SensorRef = Any  # str key, Sensor, or any object with ``id``/``source`` and ``signal``


def sensor_key(sensor: SensorRef) -> str:
    """Catalog key of a sensor reference."""
    if isinstance(sensor, str):
        return sensor
    key = getattr(sensor, "key", None)
    if isinstance(key, str):
        return key
    source = getattr(sensor, "id", None) or sensor.source
    return to_key(source, sensor.signal)


def extract_stats(
    signal: str,
    entry: EpiDataMetaInfo | None,
    level: str | None = None,
    fallback: EpiDataMetaStatsInfo = FALLBACK_STATS,
) -> EpiDataMetaStatsInfo:
    """Pick the statistics of a signal for a geo level.

    Count signals use the requested level when available. Otherwise county,
    then nation, then whichever level comes first. Signals without any
    statistics get ``fallback``.
    """
    if entry is None or not entry.geo_types:
        return fallback
    if level is not None and is_count_signal(signal):
        by_level = entry.geo_types.get(level)
        if by_level is not None:
            return by_level
    for preferred in ("county", "nation"):
        if preferred in entry.geo_types:
            return entry.geo_types[preferred]
    return next(iter(entry.geo_types.values()))


def to_value_domain(
    stats: EpiDataMetaStatsInfo,
    signal: str,
    extended: bool = False,
    count_floor: float = COUNT_SIGNAL_FLOOR,
) -> list[float]:
    """Clip the value range to mean +/- 3 stdev.

    Returns ``[low, high]``, or ``[low, mid, high]`` with ``high = mean + 6 *
    stdev`` when ``extended`` (three-stop diverging scale).
    """
    floor = count_floor if is_count_signal(signal) else 0
    domain = [max(floor, stats.mean - 3 * stats.stdev), stats.mean + 3 * stats.stdev]
    if extended:
        domain.append(stats.mean + 6 * stats.stdev)
    return domain


class MetaDataManager:
    """Immutable lookup over the sensor catalog."""

    __slots__ = ("_count_floor", "_fallback_stats", "_lookup", "_sensors", "_sources")

    def __init__(
        self,
        metadata: Sequence[EpiDataMetaSourceInfo | Mapping[str, Any]],
        *,
        fallback_stats: EpiDataMetaStatsInfo = FALLBACK_STATS,
        count_floor: float = COUNT_SIGNAL_FLOOR,
    ) -> None:
        catalog = derive_catalog(metadata)
        self._sensors = catalog.sensors
        self._sources = catalog.sources
        self._lookup = catalog.lookup
        self._fallback_stats = fallback_stats
        self._count_floor = count_floor

    @property
    def meta_sensors(self) -> tuple[Sensor, ...]:
        """All sensors, sorted by key."""
        return self._sensors

    @property
    def meta_sources(self) -> tuple[SensorSource, ...]:
        """All sources, sorted by id."""
        return self._sources

    @property
    def lookup(self) -> Mapping[str, Sensor]:
        return self._lookup

    def __len__(self) -> int:
        return len(self._sensors)

    def __contains__(self, sensor: object) -> bool:
        try:
            return sensor_key(sensor) in self._lookup
        except AttributeError:
            return False

    # -- sensors -------------------------------------------------------------

    def get_sensor(self, sensor: SensorRef) -> Sensor | None:
        return self._lookup.get(sensor_key(sensor))

    def require_sensor(self, sensor: SensorRef) -> Sensor:
        """Like ``get_sensor`` but raises ``SensorNotFound``."""
        found = self.get_sensor(sensor)
        if found is None:
            raise SensorNotFound(sensor_key(sensor))
        return found

    def get_raw_sensor(self, sensor: SensorRef) -> Sensor | None:
        """Unsmoothed counterpart of a smoothed sensor, if any."""
        s = self.get_sensor(sensor)
        if s is None or s.raw_sensor_key is None:
            return None
        return self._lookup.get(s.raw_sensor_key)

    def get_default_cases_signal(self) -> Sensor | None:
        return self.get_sensor(to_key(*DEFAULT_CASES_SIGNAL))

    def get_default_death_signal(self) -> Sensor | None:
        return self.get_sensor(to_key(*DEFAULT_DEATH_SIGNAL))

    def get_sensors_of_type(self, category: str) -> list[Sensor]:
        return [s for s in self._sensors if s.type == category]

    def get_source(self, sensor: SensorRef) -> SensorSource | None:
        """Data source owning a sensor."""
        s = self.get_sensor(sensor)
        if s is None:
            return None
        return next((src for src in self._sources if src.source == s.id), None)

    # -- metadata ------------------------------------------------------------

    def get_meta_data(self, sensor: SensorRef) -> EpiDataMetaInfo | None:
        s = self.get_sensor(sensor)
        return s.meta if s else None

    def get_levels(self, sensor: SensorRef) -> list[str]:
        """Geo levels with data; ``["county"]`` for unknown sensors."""
        entry = self.get_meta_data(sensor)
        return list(entry.geo_types) if entry else ["county"]

    def get_stats(self, sensor: SensorRef, level: str | None = None) -> EpiDataMetaStatsInfo:
        entry = self.get_meta_data(sensor)
        signal = entry.signal if entry else getattr(sensor, "signal", "")
        return extract_stats(signal, entry, level, self._fallback_stats)

    def get_time_frame(self, sensor: SensorRef) -> TimeFrame:
        """Data range of a sensor; the all-time frame for unknown sensors."""
        s = self.get_sensor(sensor)
        return s.time_frame if s else TimeFrame.all()

    def get_value_domain(
        self,
        sensor: SensorRef,
        level: str | None = None,
        *,
        extended: bool = False,
    ) -> list[float]:
        stats = self.get_stats(sensor, level)
        entry = self.get_meta_data(sensor)
        signal = entry.signal if entry else getattr(sensor, "signal", "")
        return to_value_domain(stats, signal, extended, self._count_floor)

    def scaled_value_domain(
        self,
        sensor: SensorRef,
        level: str = "county",
        *,
        extended: bool = False,
    ) -> list[float]:
        """Value domain in display units, clamped to the format's natural range.

        Fractions are scaled by 100; percentages are clamped to ``[0, 100]`` and
        per-100k rates to ``[0, 100000]``.
        """
        s = self.require_sensor(sensor)
        scaled = [d * s.value_scale_factor for d in self.get_value_domain(s, level, extended=extended)]
        ceiling = _DOMAIN_CEILINGS.get(s.format)
        if ceiling is not None:
            scaled[0] = max(0, scaled[0])
            scaled[1:] = [min(ceiling, d) for d in scaled[1:]]
        return scaled

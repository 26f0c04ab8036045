"""Sensor catalog derived from source/signal metadata.

Public API:
  - sensor: Sensor, SensorSource, presentation tables, is_count_signal,
            is_cases_signal
  - derive: derive_catalog, find_raw_signal, Catalog
  - manager: MetaDataManager, extract_stats, to_value_domain,
             FALLBACK_STATS, COUNT_SIGNAL_FLOOR
"""

from epidata_signals.catalog.derive import (
    KNOWN_LICENSES,
    Catalog,
    derive_catalog,
    find_raw_signal,
    generate_credits,
)
from epidata_signals.catalog.manager import (
    COUNT_SIGNAL_FLOOR,
    FALLBACK_STATS,
    MetaDataManager,
    extract_stats,
    sensor_key,
    to_value_domain,
)
from epidata_signals.catalog.sensor import (
    Sensor,
    SensorSource,
    is_cases_signal,
    is_count_signal,
    to_key,
)

__all__ = [
    "COUNT_SIGNAL_FLOOR",
    "FALLBACK_STATS",
    "KNOWN_LICENSES",
    "Catalog",
    "MetaDataManager",
    "Sensor",
    "SensorSource",
    "derive_catalog",
    "extract_stats",
    "find_raw_signal",
    "generate_credits",
    "is_cases_signal",
    "is_count_signal",
    "sensor_key",
    "to_key",
    "to_value_domain",
]

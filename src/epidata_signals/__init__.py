"""epidata-signals - epidemiological signal metadata and cross-signal statistics.

Architecture::

    dates.py        YYYYMMDD / YYYYWW codecs, epi weeks, calendar offsets
    timeframe.py    Immutable date ranges (TimeFrame)
    series.py       Date-indexed row helpers (observations, gap filling)
    schemas.py      Pydantic wire models for the Epidata API
    datasources/    Remote Data Client (one function per query family)
    catalog/        Metadata Derivation Engine (sensors, sources, stats)
    analysis/       Correlation Analysis Engine
    services/       Shared HTTP session

Data flow: datasources -> rows -> catalog (metadata) / analysis (series)
"""

__version__ = "0.1.0"

from epidata_signals.config import Settings, get_settings
from epidata_signals.exceptions import (
    DuplicateSensorKey,
    EpidataError,
    InsufficientOverlap,
    MalformedDate,
    SensorNotFound,
    TransportFailure,
)
from epidata_signals.logging_config import configure_logging
from epidata_signals.series import (
    Observation,
    add_missing,
    fit_range,
    observations_from_rows,
    row_date,
)
from epidata_signals.timeframe import TimeFrame

__all__ = [
    "DuplicateSensorKey",
    "EpidataError",
    "InsufficientOverlap",
    "MalformedDate",
    "Observation",
    "SensorNotFound",
    "Settings",
    "TimeFrame",
    "TransportFailure",
    "__version__",
    "add_missing",
    "configure_logging",
    "fit_range",
    "get_settings",
    "observations_from_rows",
    "row_date",
]

"""
Wire models for the Epidata API.

Pydantic models for API payloads. These define the canonical schema; the
client validates responses into them and the catalog consumes them.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Literal, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from epidata_signals.exceptions import TransportFailure

logger = logging.getLogger(__name__)

#: Epidata ``result`` code for a successful query.
RESULT_SUCCESS = 1
#: Epidata ``result`` code for "no results".
RESULT_NO_RESULTS = -2

Trend = Literal["unknown", "increasing", "decreasing", "steady"]
HighValuesAre = Literal["bad", "good", "neutral"]


class _Row(BaseModel):
    """Base for response rows: immutable, tolerant of extra columns."""

    model_config = ConfigDict(frozen=True, extra="allow")


# =============================================================================
# Response rows
# =============================================================================


class EpiDataJSONRow(_Row):
    """One observation of one signal in one region at one time.

    Every column is optional because ``fields=`` can restrict the response.
    """

    source: str | None = None
    signal: str | None = None
    geo_type: str | None = None
    geo_value: str | None = None
    time_type: Literal["day", "week"] | None = None
    time_value: int | None = None
    value: float | None = None
    stderr: float | None = None
    sample_size: float | None = None
    lag: int | None = None
    issue: int | None = None


class EpiDataTrendRow(_Row):
    geo_type: str | None = None
    geo_value: str | None = None
    signal_source: str | None = None
    signal_signal: str | None = None
    value: float | None = None

    basis_date: int | None = None
    basis_value: float | None = None
    basis_trend: Trend = "unknown"

    min_date: int | None = None
    min_value: float | None = None
    min_trend: Trend = "unknown"

    max_date: int | None = None
    max_value: float | None = None
    max_trend: Trend = "unknown"


class EpiDataCorrelationRow(_Row):
    """Server-side correlation of a reference signal against another.

    The regression line is ``y = slope * x + intercept`` over ``samples`` dates.
    """

    geo_type: str | None = None
    geo_value: str | None = None
    signal_source: str | None = None
    signal_signal: str | None = None
    lag: int | None = None
    r2: float | None = None
    slope: float | None = None
    intercept: float | None = None
    samples: int | None = None


class EpiDataBackfillRow(_Row):
    time_value: int | None = None
    issue: int | None = None
    value: float | None = None
    sample_size: float | None = None
    value_rel_change: float | None = None
    sample_size_rel_change: float | None = None
    is_anchor: bool | None = None
    value_completeness: float | None = None
    sample_size_completeness: float | None = None


class EpiDataMetaEntry(_Row):
    """Flat per-(signal, geo_type) metadata row from ``covidcast_meta``."""

    data_source: str | None = None
    signal: str | None = None
    time_type: str | None = None
    geo_type: str | None = None
    min_time: int | None = None
    max_time: int | None = None
    max_issue: int | None = None
    max_value: float | None = None
    mean_value: float | None = None
    stdev_value: float | None = None


class CoverageEntry(_Row):
    date: str
    count: int


class EpiDataSignalStatusRow(_Row):
    name: str | None = None
    source: str | None = None
    covidcast_signal: str | None = None
    latest_issue: str | None = None
    latest_time_value: str | None = None
    coverage: dict[str, list[CoverageEntry]] = Field(default_factory=dict)


# =============================================================================
# Envelopes
# =============================================================================

RowT = TypeVar("RowT", bound=BaseModel)


class _Envelope(BaseModel):
    result: int
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.result == RESULT_SUCCESS

    def raise_for_result(self) -> None:
        """Raise ``TransportFailure`` unless ``result`` signals success."""
        if not self.ok:
            msg = f"Epidata query failed (result={self.result}): {self.message}"
            raise TransportFailure(msg)


class EpiDataResponse(_Envelope, Generic[RowT]):
    """``{result, message, epidata: [...]}``."""

    epidata: list[RowT] = Field(default_factory=list)

    @field_validator("epidata", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class EpiDataTreeResponse(_Envelope, Generic[RowT]):
    """Tree-format envelope; ``epidata`` is keyed by the grouping dimension.

    The API wraps the mapping in a single-element list; it is unwrapped here.
    """

    epidata: dict[str, list[RowT]] = Field(default_factory=dict)

    @field_validator("epidata", mode="before")
    @classmethod
    def _unwrap(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, list):
            return v[0] if v and v[0] is not None else {}
        return v


# =============================================================================
# Source / signal descriptors (input to the catalog)
# =============================================================================


class EpiDataMetaStatsInfo(BaseModel):
    """Descriptive statistics for one (signal, geo level)."""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    mean: float
    stdev: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _ordered(self) -> EpiDataMetaStatsInfo:
        if not self.min <= self.mean <= self.max:
            msg = f"Expected min <= mean <= max, got {self.min}, {self.mean}, {self.max}"
            raise ValueError(msg)
        return self


class Link(BaseModel):
    model_config = ConfigDict(frozen=True)

    alt: str = ""
    href: str


class EpiDataMetaInfo(BaseModel):
    """Descriptor of one signal as published by the source metadata endpoint."""

    model_config = ConfigDict(frozen=True, extra="allow")

    source: str
    signal: str
    name: str = ""
    active: bool = True
    short_description: str | None = None
    description: str | None = None
    time_label: str = "Date"
    value_label: str | None = None
    format: str = "raw"
    category: str | None = None
    high_values_are: HighValuesAre = "neutral"
    is_smoothed: bool = False
    is_weighted: bool = False
    is_cumulative: bool = False
    has_stderr: bool = False
    has_sample_size: bool = False
    signal_basename: str | None = None
    time_type: Literal["day", "week"] | None = None
    geo_types: dict[str, EpiDataMetaStatsInfo] = Field(default_factory=dict)
    min_time: int
    max_time: int
    max_issue: int

    @field_validator("format", mode="before")
    @classmethod
    def _default_format(cls, v: Any) -> Any:
        return v or "raw"

    @field_validator("high_values_are", mode="before")
    @classmethod
    def _default_direction(cls, v: Any) -> Any:
        return v or "neutral"

    @field_validator("geo_types", mode="before")
    @classmethod
    def _valid_levels(cls, v: Any) -> Any:
        """Drop per-level statistics that are missing or inconsistent.

        A dropped level falls back to the next preferred level, or to the
        fallback statistics, instead of failing the whole descriptor.
        """
        if v is None:
            return {}
        if not isinstance(v, dict):
            return v
        levels: dict[str, EpiDataMetaStatsInfo] = {}
        for level, stats in v.items():
            try:
                levels[level] = EpiDataMetaStatsInfo.model_validate(stats)
            except ValidationError as exc:
                logger.warning("Ignoring invalid %s statistics: %s", level, exc.errors()[0]["msg"])
        return levels


class EpiDataMetaSourceInfo(BaseModel):
    """Descriptor of one data source and its signals."""

    model_config = ConfigDict(frozen=True, extra="allow")

    source: str
    db_source: str | None = None
    name: str = ""
    description: str | None = None
    reference_signal: str | None = None
    license: str | None = None
    dua: str | None = None
    link: list[Link] = Field(default_factory=list)
    signals: list[EpiDataMetaInfo] = Field(default_factory=list)

    @field_validator("link", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

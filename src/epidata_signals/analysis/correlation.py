"""Lagged correlation between two signals.

Both series are indexed by date, never by position, so series with different
ranges, cadences or gaps only pair values that share a date. For a lag ``L``
the pairs are::

    (a[d], b[d - L])   for every date d where both values exist

A positive lag therefore means ``b`` leads ``a`` by ``L`` steps. For each lag
in ``[-window, +window]`` an ordinary least-squares line of ``b`` on ``a`` is
fitted, together with the correlation coefficient and the sample count.
"""

from __future__ import annotations

import logging
import statistics
from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

from epidata_signals.config import get_settings
from epidata_signals.dates import TimeType
from epidata_signals.exceptions import InsufficientOverlap
from epidata_signals.series import row_date

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

#: Fewest paired samples a lag needs for a regression.
MIN_SAMPLES = 2

#: Decimal places of the reported correlation.
R2_DIGITS = 2


@dataclass(frozen=True)
class LagMetric:
    """Regression of ``b`` on ``a`` at one lag: ``b = slope * a + intercept``."""

    lag: int
    r2: float
    slope: float
    intercept: float
    samples: int


@dataclass(frozen=True)
class CorrelationResult:
    """Per-lag metrics plus the lag with the strongest correlation."""

    r2_at_0: float
    lag_at_max_r2: int
    r2_at_max_r2: float
    lags: tuple[LagMetric, ...]


def to_series(points: Iterable[Any]) -> dict[date, float]:
    """Index observations by date, dropping missing values.

    Accepts ``Observation`` objects, ``EpiDataJSONRow`` rows, or anything with
    a ``value`` and either a ``date`` or a ``time_value``. A later point for
    the same date replaces an earlier one.
    """
    series: dict[date, float] = {}
    for point in points:
        if point.value is None:
            continue
        series[row_date(point)] = float(point.value)
    return series


def interpolate_gaps(series: dict[date, float], step: timedelta) -> dict[date, float]:
    """Linearly fill missing dates between the first and last observation."""
    known = sorted(series)
    filled = dict(series)
    for start, end in zip(known, known[1:]):
        gap = (end - start) // step
        for i in range(1, gap):
            filled[start + i * step] = series[start] + (series[end] - series[start]) * i / gap
    return filled


def lag_pairs(
    a: dict[date, float],
    b: dict[date, float],
    lag: int,
    step: timedelta = timedelta(days=1),
) -> tuple[list[float], list[float]]:
    """Paired ``(a[d], b[d - lag])`` values over the union of dates."""
    shift = lag * step
    xs: list[float] = []
    ys: list[float] = []
    for d in sorted(a.keys() | b.keys()):
        if d in a and d - shift in b:
            xs.append(a[d])
            ys.append(b[d - shift])
    return xs, ys


def regress(xs: list[float], ys: list[float], lag: int = 0) -> LagMetric:
    """Fit ``ys`` on ``xs``.

    Raises:
        InsufficientOverlap: With fewer than two points or a constant series.
    """
    try:
        slope, intercept = statistics.linear_regression(xs, ys)
        r = statistics.correlation(xs, ys)
    except statistics.StatisticsError as exc:
        msg = f"Cannot correlate at lag {lag} with {len(xs)} samples: {exc}"
        raise InsufficientOverlap(msg) from exc
    return LagMetric(
        lag=lag,
        r2=round(r, R2_DIGITS),
        slope=slope,
        intercept=intercept,
        samples=len(xs),
    )


def generate_correlation_metrics(
    series_a: Iterable[Any],
    series_b: Iterable[Any],
    lag_window: int | None = None,
    *,
    time_type: TimeType = "day",
    fill_gaps: bool = False,
    min_samples: int = MIN_SAMPLES,
) -> CorrelationResult:
    """
    Correlate two series across a symmetric lag window.

    Args:
        series_a: Observations of the first signal (the regressor).
        series_b: Observations of the second signal, shifted by each lag.
        lag_window: Largest absolute lag; defaults to
            ``Settings.correlation_lag_window`` (28).
        time_type: Unit of a lag step, days or epi weeks.
        fill_gaps: Linearly interpolate missing dates inside each series
            before aligning.
        min_samples: Fewest paired samples every lag must have.

    Returns:
        CorrelationResult with ``2 * lag_window + 1`` lag rows ordered from
        ``-lag_window`` to ``+lag_window``. ``r2`` values are the signed
        correlation coefficient rounded to two decimals. The best lag maximizes
        ``r2``; ties go to the smallest absolute lag, then the smallest lag.

    Raises:
        InsufficientOverlap: If any lag has fewer than ``min_samples`` pairs or
            a constant side.
    """
    if lag_window is None:
        lag_window = get_settings().correlation_lag_window
    if lag_window < 0:
        msg = f"lag_window must be >= 0, got {lag_window}"
        raise ValueError(msg)
    min_samples = max(min_samples, MIN_SAMPLES)

    step = timedelta(weeks=1) if time_type == "week" else timedelta(days=1)
    a = to_series(series_a)
    b = to_series(series_b)
    if fill_gaps:
        a = interpolate_gaps(a, step)
        b = interpolate_gaps(b, step)

    lags: list[LagMetric] = []
    for lag in range(-lag_window, lag_window + 1):
        xs, ys = lag_pairs(a, b, lag, step)
        if len(xs) < min_samples:
            msg = (
                f"Only {len(xs)} overlapping samples at lag {lag} "
                f"(need {min_samples}); series share too few dates"
            )
            raise InsufficientOverlap(msg)
        lags.append(regress(xs, ys, lag))

    best = max(lags, key=lambda m: (m.r2, -abs(m.lag), -m.lag))
    logger.debug(
        "Correlation over %d lags: r2 at 0 = %.2f, best lag %d (r2 = %.2f)",
        len(lags),
        lags[lag_window].r2,
        best.lag,
        best.r2,
    )
    return CorrelationResult(
        r2_at_0=lags[lag_window].r2,
        lag_at_max_r2=best.lag,
        r2_at_max_r2=best.r2,
        lags=tuple(lags),
    )

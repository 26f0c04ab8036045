"""Cross-signal statistics.

Each module combines two or more signal series into derived metrics.

Dependency rule: analysis/ consumes observations and schema rows only.
It never fetches data and never formats values for display.

Modules:
  - correlation: two series -> per-lag regression and best lag
"""

from epidata_signals.analysis.correlation import (
    MIN_SAMPLES,
    CorrelationResult,
    LagMetric,
    generate_correlation_metrics,
    interpolate_gaps,
    lag_pairs,
    regress,
    to_series,
)

__all__ = [
    "MIN_SAMPLES",
    "CorrelationResult",
    "LagMetric",
    "generate_correlation_metrics",
    "interpolate_gaps",
    "lag_pairs",
    "regress",
    "to_series",
]

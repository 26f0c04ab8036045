"""Signal value queries: points, tree, trend, correlation and backfill."""

from __future__ import annotations

from typing import TYPE_CHECKING

from epidata_signals.dates import format_api_time
from epidata_signals.datasources.epidata.client import (
    BACKFILL_PATH,
    CORRELATION_PATH,
    COVIDCAST_PATH,
    TREND_PATH,
    GeoPair,
    Params,
    SourceSignalPair,
    TimePair,
    add_fields,
    add_param,
    fetch_epidata,
)
from epidata_signals.schemas import (
    EpiDataBackfillRow,
    EpiDataCorrelationRow,
    EpiDataJSONRow,
    EpiDataResponse,
    EpiDataTreeResponse,
    EpiDataTrendRow,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    import requests

    from epidata_signals.timeframe import TimeFrame


def _signal_geo_time(
    signal: SourceSignalPair | Sequence[SourceSignalPair],
    geo: GeoPair | Sequence[GeoPair],
    time: TimePair | Sequence[TimePair],
    fields: Sequence[str] | None,
) -> Params:
    params: Params = []
    add_param(params, "signal", signal)
    add_param(params, "geo", geo)
    add_param(params, "time", time)
    add_fields(params, fields)
    return params


def call_api(
    signal: SourceSignalPair | Sequence[SourceSignalPair],
    geo: GeoPair | Sequence[GeoPair],
    time: TimePair | Sequence[TimePair],
    fields: Sequence[str] | None = None,
    *,
    endpoint: str | None = None,
    http: requests.Session | None = None,
) -> EpiDataResponse[EpiDataJSONRow]:
    """
    Fetch signal values for the given signals, regions and times.

    Args:
        signal: One or more ``source:signal`` pairs.
        geo: One or more ``geo_type:geo_value`` pairs.
        time: One or more time selectors.
        fields: Optional subset of row columns to return.
        endpoint: Override of ``Settings.epidata_endpoint_url``.
        http: Override of the shared session.

    Returns:
        Envelope with one ``EpiDataJSONRow`` per observation.
    """
    params = _signal_geo_time(signal, geo, time, fields)
    return fetch_epidata(
        COVIDCAST_PATH,
        params,
        EpiDataResponse[EpiDataJSONRow],
        endpoint=endpoint,
        http=http,
    )


def call_tree_api(
    signal: SourceSignalPair | Sequence[SourceSignalPair],
    geo: GeoPair | Sequence[GeoPair],
    time: TimePair | Sequence[TimePair],
    fields: Sequence[str] | None = None,
    *,
    endpoint: str | None = None,
    http: requests.Session | None = None,
) -> EpiDataTreeResponse[EpiDataJSONRow]:
    """Same query as ``call_api`` with rows grouped by signal (``format=tree``)."""
    params = _signal_geo_time(signal, geo, time, fields)
    params.append(("format", "tree"))
    return fetch_epidata(
        COVIDCAST_PATH,
        params,
        EpiDataTreeResponse[EpiDataJSONRow],
        endpoint=endpoint,
        http=http,
    )


def call_trend_api(
    signal: SourceSignalPair | Sequence[SourceSignalPair],
    geo: GeoPair | Sequence[GeoPair],
    day: date,
    window: TimeFrame,
    fields: Sequence[str] | None = None,
    *,
    endpoint: str | None = None,
    http: requests.Session | None = None,
) -> EpiDataResponse[EpiDataTrendRow]:
    """Trend of each signal at ``day`` relative to the ``window`` basis."""
    params: Params = []
    add_param(params, "signal", signal)
    add_param(params, "geo", geo)
    params.append(("date", str(format_api_time(day))))
    params.append(("window", window.range))
    add_fields(params, fields)
    return fetch_epidata(
        TREND_PATH,
        params,
        EpiDataResponse[EpiDataTrendRow],
        endpoint=endpoint,
        http=http,
    )


def call_correlation_api(
    reference: SourceSignalPair,
    others: SourceSignalPair | Sequence[SourceSignalPair],
    geo: GeoPair | Sequence[GeoPair],
    window: TimeFrame,
    lag: int | None = None,
    fields: Sequence[str] | None = None,
    *,
    endpoint: str | None = None,
    http: requests.Session | None = None,
) -> EpiDataResponse[EpiDataCorrelationRow]:
    """Server-side lagged correlation of ``reference`` against ``others``."""
    params: Params = [("reference", str(reference))]
    add_param(params, "others", others)
    add_param(params, "geo", geo)
    params.append(("window", window.range))
    if lag is not None:
        params.append(("lag", str(lag)))
    add_fields(params, fields)
    return fetch_epidata(
        CORRELATION_PATH,
        params,
        EpiDataResponse[EpiDataCorrelationRow],
        endpoint=endpoint,
        http=http,
    )


def call_backfill_api(
    signal: SourceSignalPair,
    time: TimePair,
    geo: GeoPair,
    anchor_lag: int | None = None,
    fields: Sequence[str] | None = None,
    *,
    endpoint: str | None = None,
    http: requests.Session | None = None,
) -> EpiDataResponse[EpiDataBackfillRow]:
    """Backfill profile (how values changed across issues) of one signal."""
    params: Params = [
        ("signal", str(signal)),
        ("geo", str(geo)),
        ("time", str(time)),
    ]
    if anchor_lag is not None:
        params.append(("anchor_lag", str(anchor_lag)))
    add_fields(params, fields)
    return fetch_epidata(
        BACKFILL_PATH,
        params,
        EpiDataResponse[EpiDataBackfillRow],
        endpoint=endpoint,
        http=http,
    )

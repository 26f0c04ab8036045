"""Catalog metadata and status queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import TypeAdapter

from epidata_signals.datasources.epidata.client import (
    META_PATH,
    SOURCE_META_PATH,
    STATUS_PATH,
    Params,
    SourceSignalPair,
    add_fields,
    add_param,
    fetch_epidata,
    request_epidata,
)
from epidata_signals.schemas import (
    EpiDataMetaEntry,
    EpiDataMetaSourceInfo,
    EpiDataResponse,
    EpiDataSignalStatusRow,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    import requests

_SOURCE_LIST = TypeAdapter(list[EpiDataMetaSourceInfo])


def call_meta_api(
    signals: Sequence[SourceSignalPair] | None = None,
    fields: Sequence[str] | None = None,
    filters: Mapping[str, str] | None = None,
    *,
    endpoint: str | None = None,
    http: requests.Session | None = None,
) -> EpiDataResponse[EpiDataMetaEntry]:
    """
    Fetch flat per-(signal, geo_type) metadata entries.

    Args:
        signals: Restrict to these signals (all signals when omitted).
        fields: Optional subset of columns.
        filters: Extra equality filters passed through as parameters,
            e.g. ``{"time_types": "day"}``.
    """
    params: Params = []
    if signals:
        add_param(params, "signals", list(signals))
    add_fields(params, fields)
    for key, value in (filters or {}).items():
        params.append((key, value))
    return fetch_epidata(
        META_PATH,
        params,
        EpiDataResponse[EpiDataMetaEntry],
        endpoint=endpoint,
        http=http,
    )


def call_source_meta_api(
    *,
    endpoint: str | None = None,
    http: requests.Session | None = None,
) -> list[EpiDataMetaSourceInfo]:
    """
    Fetch the source/signal descriptor catalog.

    This endpoint returns a bare JSON array (no envelope). Its output is the
    input of ``catalog.derive_catalog`` / ``MetaDataManager``.
    """
    payload = request_epidata(SOURCE_META_PATH, [], endpoint=endpoint, http=http)
    return _SOURCE_LIST.validate_python(payload)


def call_signal_status_api(
    *,
    endpoint: str | None = None,
    http: requests.Session | None = None,
) -> EpiDataResponse[EpiDataSignalStatusRow]:
    """Latest issue, latest time value and coverage per dashboard signal."""
    return fetch_epidata(
        STATUS_PATH,
        [],
        EpiDataResponse[EpiDataSignalStatusRow],
        endpoint=endpoint,
        http=http,
    )

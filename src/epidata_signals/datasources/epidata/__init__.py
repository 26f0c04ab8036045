"""Delphi Epidata API data source.

Typed access to the COVIDcast signal endpoints. One function per query
family; every function returns a validated pydantic envelope.

Public API:
  - client: SourceSignalPair, GeoPair, TimePair, fetch_epidata (transport)
  - covidcast: call_api, call_tree_api, call_trend_api,
               call_correlation_api, call_backfill_api
  - meta: call_meta_api, call_source_meta_api, call_signal_status_api
"""

from epidata_signals.datasources.epidata.client import (
    GeoPair,
    SourceSignalPair,
    TimePair,
    endpoint_url,
    fetch_epidata,
    request_epidata,
)
from epidata_signals.datasources.epidata.covidcast import (
    call_api,
    call_backfill_api,
    call_correlation_api,
    call_trend_api,
    call_tree_api,
)
from epidata_signals.datasources.epidata.meta import (
    call_meta_api,
    call_signal_status_api,
    call_source_meta_api,
)

__all__ = [
    "GeoPair",
    "SourceSignalPair",
    "TimePair",
    "call_api",
    "call_backfill_api",
    "call_correlation_api",
    "call_meta_api",
    "call_signal_status_api",
    "call_source_meta_api",
    "call_trend_api",
    "call_tree_api",
    "endpoint_url",
    "fetch_epidata",
    "request_epidata",
]

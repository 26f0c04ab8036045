"""Epidata API constants, parameter encoding and transport selection.

API docs: https://cmu-delphi.github.io/delphi-epidata/api/covidcast.html

Every query family goes through ``fetch_epidata``: parameters are encoded as
repeated ``key=value`` pairs, sent as a GET when the resulting URL is short
enough, and otherwise form-encoded into a POST body to the same path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, TypeVar

import requests
from pydantic import BaseModel

from epidata_signals.config import get_settings
from epidata_signals.dates import EpiWeek, TimeType, format_api_time, format_api_week
from epidata_signals.exceptions import TransportFailure
from epidata_signals.services.http import session

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

# Logical endpoint paths (relative to Settings.epidata_endpoint_url)
COVIDCAST_PATH = "/covidcast/"
TREND_PATH = "/covidcast/trend"
CORRELATION_PATH = "/covidcast/correlation"
BACKFILL_PATH = "/covidcast/backfill"
SOURCE_META_PATH = "/covidcast/meta"
META_PATH = "/covidcast_meta/"
STATUS_PATH = "/signal_dashboard_status/"

Params = list[tuple[str, str]]
ResponseT = TypeVar("ResponseT", bound=BaseModel)


# =============================================================================
# Query parameter pairs
# =============================================================================


@dataclass(frozen=True)
class SourceSignalPair:
    """``source:signal`` selector."""

    source: str
    signal: str

    def __str__(self) -> str:
        return f"{self.source}:{self.signal}"


@dataclass(frozen=True)
class GeoPair:
    """``geo_type:geo_value`` selector; ``geo_value="*"`` selects all regions."""

    geo_type: str
    geo_value: str = "*"

    def __str__(self) -> str:
        return f"{self.geo_type}:{self.geo_value}"


TimeValue = date | EpiWeek | int | str


@dataclass(frozen=True)
class TimePair:
    """Time selector: a single value, a ``(start, end)`` range, or a list.

    Examples::

        TimePair("day", date(2020, 6, 1))                         # day:20200601
        TimePair("day", (date(2020, 6, 1), date(2020, 6, 30)))    # day:20200601-20200630
        TimePair("week", [202020, 202022])                        # week:202020,202022
    """

    time_type: TimeType
    values: TimeValue | tuple[TimeValue, TimeValue] | list[TimeValue]

    def _encode(self, value: TimeValue) -> str:
        if isinstance(value, EpiWeek):
            return str(value.format())
        if isinstance(value, date):
            if self.time_type == "week":
                return str(format_api_week(value))
            return str(format_api_time(value))
        return str(value)

    def __str__(self) -> str:
        if isinstance(self.values, tuple):
            start, end = self.values
            return f"{self.time_type}:{self._encode(start)}-{self._encode(end)}"
        if isinstance(self.values, list):
            return f"{self.time_type}:{','.join(self._encode(v) for v in self.values)}"
        return f"{self.time_type}:{self._encode(self.values)}"


def add_param(params: Params, key: str, pairs: object | Sequence[object]) -> None:
    """Append one ``key=value`` entry per pair (never comma-joined)."""
    if isinstance(pairs, (list, tuple)):
        params.extend((key, str(p)) for p in pairs)
    else:
        params.append((key, str(pairs)))


def add_fields(params: Params, fields: Sequence[str] | None) -> None:
    if fields:
        params.append(("fields", ",".join(fields)))


# =============================================================================
# Transport
# =============================================================================


def endpoint_url(path: str, endpoint: str | None = None) -> str:
    """Absolute URL of a logical endpoint path."""
    base = endpoint if endpoint is not None else get_settings().epidata_endpoint_url
    return base.rstrip("/") + path


def request_epidata(
    path: str,
    params: Params,
    *,
    endpoint: str | None = None,
    http: requests.Session | None = None,
) -> object:
    """Issue the request and return the decoded JSON payload.

    Sends a GET if the full URL is shorter than ``Settings.max_get_url_length``,
    otherwise POSTs the same parameters form-encoded to the bare path.

    Raises:
        TransportFailure: On network errors, HTTP error statuses or a
            non-JSON body. The ``requests`` exception is chained.
    """
    http = http or session
    url = endpoint_url(path, endpoint)
    full_url = requests.Request("GET", url, params=params).prepare().url or url

    try:
        if len(full_url) < get_settings().max_get_url_length:
            logger.debug("GET %s (%d chars)", url, len(full_url))
            resp = http.get(url, params=params)
        else:
            logger.debug("POST %s (URL would be %d chars)", url, len(full_url))
            resp = http.post(url, data=params)
        resp.raise_for_status()
        return resp.json()
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else None
        msg = f"Epidata request to {url} failed with HTTP {status}"
        raise TransportFailure(msg, status_code=status) from exc
    except (requests.RequestException, ValueError) as exc:
        msg = f"Epidata request to {url} failed: {exc}"
        raise TransportFailure(msg) from exc


def fetch_epidata(
    path: str,
    params: Params,
    response_model: type[ResponseT],
    *,
    endpoint: str | None = None,
    http: requests.Session | None = None,
) -> ResponseT:
    """Request ``path`` and validate the envelope into ``response_model``."""
    payload = request_epidata(path, params, endpoint=endpoint, http=http)
    return response_model.model_validate(payload)

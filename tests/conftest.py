"""Shared fixtures: a small source/signal metadata payload."""

from __future__ import annotations

from typing import Any

import pytest


def make_signal(source: str, signal: str, **overrides: Any) -> dict[str, Any]:
    """Signal descriptor shaped like the metadata endpoint output."""
    entry: dict[str, Any] = {
        "source": source,
        "signal": signal,
        "name": signal.replace("_", " ").title(),
        "active": True,
        "short_description": f"Short {signal}",
        "description": f"  Long description of {signal}.  ",
        "time_label": "Date",
        "value_label": None,
        "format": "raw",
        "category": "public",
        "high_values_are": "bad",
        "is_smoothed": False,
        "is_weighted": False,
        "is_cumulative": False,
        "has_stderr": False,
        "has_sample_size": False,
        "signal_basename": signal,
        "time_type": "day",
        "geo_types": {
            "county": {"min": 0.0, "max": 50.0, "mean": 10.0, "stdev": 2.0},
            "state": {"min": 0.0, "max": 40.0, "mean": 12.0, "stdev": 3.0},
            "nation": {"min": 1.0, "max": 30.0, "mean": 15.0, "stdev": 4.0},
        },
        "min_time": 20200401,
        "max_time": 20210115,
        "max_issue": 20210117,
    }
    entry.update(overrides)
    return entry


@pytest.fixture
def raw_metadata() -> list[dict[str, Any]]:
    """Two sources (deliberately unsorted) with raw/smoothed signal pairs."""
    return [
        {
            "source": "jhu-csse",
            "db_source": "jhu-csse",
            "name": "JHU Cases",
            "description": "Confirmed cases and deaths.",
            "reference_signal": "confirmed_7dav_incidence_prop",
            "license": "CC BY",
            "link": [{"alt": "Technical description", "href": "https://example.org/jhu"}],
            "signals": [
                make_signal(
                    "jhu-csse",
                    "confirmed_incidence_num",
                    signal_basename="confirmed_incidence",
                    format="count",
                    geo_types={
                        "county": {"min": 0.0, "max": 900.0, "mean": 20.0, "stdev": 30.0},
                        "state": {"min": 0.0, "max": 9000.0, "mean": 700.0, "stdev": 800.0},
                    },
                ),
                make_signal(
                    "jhu-csse",
                    "confirmed_7dav_incidence_num",
                    signal_basename="confirmed_incidence",
                    format="count",
                    is_smoothed=True,
                ),
                make_signal(
                    "jhu-csse",
                    "confirmed_incidence_prop",
                    signal_basename="confirmed_incidence",
                    format="per100k",
                ),
                make_signal(
                    "jhu-csse",
                    "confirmed_7dav_incidence_prop",
                    signal_basename="confirmed_incidence",
                    format="per100k",
                    is_smoothed=True,
                ),
                make_signal(
                    "jhu-csse",
                    "deaths_7dav_incidence_prop",
                    signal_basename="deaths_incidence",
                    format="per100k",
                    is_smoothed=True,
                ),
            ],
        },
        {
            "source": "doctor-visits",
            "db_source": "doctor-visits",
            "name": "Doctor Visits",
            "description": None,
            "reference_signal": "smoothed_adj_cli",
            "license": None,
            "link": [],
            "signals": [
                make_signal(
                    "doctor-visits",
                    "smoothed_adj_cli",
                    signal_basename="adj_cli",
                    format="percent",
                    is_smoothed=True,
                    is_weighted=True,
                    category="early",
                ),
                make_signal(
                    "doctor-visits",
                    "smoothed_cli",
                    signal_basename="cli",
                    format="fraction",
                    is_smoothed=True,
                    high_values_are="neutral",
                    geo_types={},
                    category="early",
                ),
                make_signal(
                    "doctor-visits",
                    "weekly_cli",
                    signal_basename="weekly_cli",
                    time_type="week",
                    min_time=202014,
                    max_time=202102,
                    max_issue=202103,
                    geo_types={
                        "msa": {"min": 0.0, "max": 10.0, "mean": 3.0, "stdev": 1.0},
                        "hrr": {"min": 0.0, "max": 12.0, "mean": 4.0, "stdev": 1.5},
                    },
                ),
            ],
        },
    ]

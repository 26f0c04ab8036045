"""Tests for MetaDataManager lookups, statistics and value domains."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from conftest import make_signal
from epidata_signals.catalog import (
    COUNT_SIGNAL_FLOOR,
    FALLBACK_STATS,
    MetaDataManager,
    extract_stats,
    sensor_key,
    to_value_domain,
)
from epidata_signals.catalog.sensor import SensorLike
from epidata_signals.exceptions import SensorNotFound
from epidata_signals.schemas import EpiDataJSONRow, EpiDataMetaInfo, EpiDataMetaStatsInfo
from epidata_signals.timeframe import ALL_TIME_START


class _Ref:
    """Minimal ``SensorLike``."""

    def __init__(self, id: str, signal: str) -> None:  # noqa: A002
        self.id = id
        self.signal = signal


def _single_source(*signals: dict[str, Any]) -> list[dict[str, Any]]:
    return [{"source": "src", "name": "Source", "signals": list(signals)}]


@pytest.fixture
def manager(raw_metadata: list[dict]) -> MetaDataManager:
    return MetaDataManager(raw_metadata)


# =============================================================================
# Pure helpers
# =============================================================================


class TestSensorKey:
    """Tests for resolving sensor references to keys."""

    def test_string(self) -> None:
        assert sensor_key("src-sig") == "src-sig"

    def test_sensor_like(self) -> None:
        ref: SensorLike = _Ref("src", "sig")
        assert sensor_key(ref) == "src-sig"

    def test_row_with_source(self) -> None:
        row = EpiDataJSONRow(source="src", signal="sig")
        assert sensor_key(row) == "src-sig"


class TestToValueDomain:
    """Tests for the mean +/- 3 stdev domain."""

    def test_basic(self) -> None:
        stats = EpiDataMetaStatsInfo(min=0, max=50, mean=10, stdev=2)
        assert to_value_domain(stats, "smoothed_cli") == [4, 16]

    def test_clipped_at_zero(self) -> None:
        stats = EpiDataMetaStatsInfo(min=0, max=50, mean=2, stdev=2)
        assert to_value_domain(stats, "smoothed_cli") == [0, 8]

    def test_count_floor(self) -> None:
        stats = EpiDataMetaStatsInfo(min=0, max=900, mean=20, stdev=30)
        assert to_value_domain(stats, "confirmed_incidence_num") == [COUNT_SIGNAL_FLOOR, 110]

    def test_extended(self) -> None:
        stats = EpiDataMetaStatsInfo(min=0, max=50, mean=10, stdev=2)
        assert to_value_domain(stats, "smoothed_cli", extended=True) == [4, 16, 22]


class TestExtractStats:
    """Tests for picking the statistics of a geo level."""

    def test_no_entry(self) -> None:
        assert extract_stats("sig", None) is FALLBACK_STATS

    def test_prefers_county_then_nation(self) -> None:
        entry = EpiDataMetaInfo.model_validate(
            make_signal(
                "src",
                "sig",
                geo_types={
                    "state": {"min": 0, "max": 9, "mean": 1, "stdev": 1},
                    "nation": {"min": 0, "max": 9, "mean": 2, "stdev": 1},
                },
            )
        )
        assert extract_stats("sig", entry, "state").mean == 2

    def test_stats_validation(self) -> None:
        with pytest.raises(ValueError):
            EpiDataMetaStatsInfo(min=10, max=20, mean=5, stdev=1)
        with pytest.raises(ValueError):
            EpiDataMetaStatsInfo(min=0, max=20, mean=5, stdev=-1)


# =============================================================================
# Manager lookups
# =============================================================================


class TestLookups:
    """Tests for sensor and source lookups."""

    def test_len_and_contains(self, manager: MetaDataManager) -> None:
        assert len(manager) == 8
        assert "jhu-csse-confirmed_incidence_num" in manager
        assert _Ref("doctor-visits", "smoothed_cli") in manager
        assert "nope-nothing" not in manager
        assert 42 not in manager

    def test_meta_sensors_sorted(self, manager: MetaDataManager) -> None:
        keys = [s.key for s in manager.meta_sensors]
        assert keys == sorted(keys)
        assert [s.source for s in manager.meta_sources] == ["doctor-visits", "jhu-csse"]

    def test_get_sensor_by_any_reference(self, manager: MetaDataManager) -> None:
        by_key = manager.get_sensor("doctor-visits-smoothed_cli")
        assert by_key is not None
        assert manager.get_sensor(_Ref("doctor-visits", "smoothed_cli")) is by_key
        assert manager.get_sensor(by_key) is by_key
        assert manager.get_sensor(EpiDataJSONRow(source="doctor-visits", signal="smoothed_cli")) is by_key

    def test_unknown_sensor(self, manager: MetaDataManager) -> None:
        assert manager.get_sensor("nope-nothing") is None
        with pytest.raises(SensorNotFound):
            manager.require_sensor("nope-nothing")
        with pytest.raises(KeyError):
            manager.require_sensor("nope-nothing")

    def test_raw_sensor(self, manager: MetaDataManager) -> None:
        raw = manager.get_raw_sensor("jhu-csse-confirmed_7dav_incidence_prop")
        assert raw is not None
        assert raw.key == "jhu-csse-confirmed_incidence_prop"
        assert manager.get_raw_sensor("jhu-csse-deaths_7dav_incidence_prop") is None
        assert manager.get_raw_sensor("nope-nothing") is None

    def test_default_signals(self, manager: MetaDataManager) -> None:
        cases = manager.get_default_cases_signal()
        deaths = manager.get_default_death_signal()
        assert cases is not None and cases.key == "jhu-csse-confirmed_7dav_incidence_prop"
        assert deaths is not None and deaths.key == "jhu-csse-deaths_7dav_incidence_prop"

    def test_default_signals_absent(self) -> None:
        mgr = MetaDataManager(_single_source(make_signal("src", "sig")))
        assert mgr.get_default_cases_signal() is None

    def test_sensors_of_type(self, manager: MetaDataManager) -> None:
        early = manager.get_sensors_of_type("early")
        assert [s.key for s in early] == [
            "doctor-visits-smoothed_adj_cli",
            "doctor-visits-smoothed_cli",
        ]
        assert len(manager.get_sensors_of_type("public")) == 6
        assert manager.get_sensors_of_type("late") == []

    def test_get_source(self, manager: MetaDataManager) -> None:
        source = manager.get_source("jhu-csse-deaths_7dav_incidence_prop")
        assert source is not None
        assert source.name == "JHU Cases"
        assert manager.get_source("nope-nothing") is None

    def test_immutable(self, manager: MetaDataManager) -> None:
        with pytest.raises(AttributeError):
            manager.extra = 1  # type: ignore[attr-defined]
        with pytest.raises(TypeError):
            manager.lookup["x"] = manager.meta_sensors[0]  # type: ignore[index]


# =============================================================================
# Metadata, statistics and domains
# =============================================================================


class TestMetadata:
    """Tests for levels, time frames and statistics."""

    def test_meta_data(self, manager: MetaDataManager) -> None:
        meta = manager.get_meta_data("doctor-visits-weekly_cli")
        assert meta is not None
        assert meta.time_type == "week"
        assert manager.get_meta_data("nope-nothing") is None

    def test_levels(self, manager: MetaDataManager) -> None:
        assert manager.get_levels("doctor-visits-weekly_cli") == ["msa", "hrr"]
        assert manager.get_levels("nope-nothing") == ["county"]

    def test_time_frame(self, manager: MetaDataManager) -> None:
        tf = manager.get_time_frame("jhu-csse-confirmed_incidence_prop")
        assert tf.range == "20200401-20210115"

    def test_time_frame_unknown(self, manager: MetaDataManager) -> None:
        tf = manager.get_time_frame("nope-nothing")
        assert tf.min == ALL_TIME_START
        assert tf.max <= date.today()

    def test_count_signal_uses_requested_level(self, manager: MetaDataManager) -> None:
        assert manager.get_stats("jhu-csse-confirmed_incidence_num", "state").mean == 700
        assert manager.get_stats("jhu-csse-confirmed_incidence_num").mean == 20
        assert manager.get_stats("jhu-csse-confirmed_incidence_num", "nation").mean == 20

    def test_rate_signal_ignores_level(self, manager: MetaDataManager) -> None:
        assert manager.get_stats("jhu-csse-confirmed_incidence_prop", "state").mean == 10

    def test_first_level_when_no_preferred(self, manager: MetaDataManager) -> None:
        assert manager.get_stats("doctor-visits-weekly_cli").mean == 3

    def test_invalid_statistics_use_fallback(self) -> None:
        mgr = MetaDataManager(
            _single_source(
                make_signal(
                    "src",
                    "sig",
                    geo_types={"county": None, "state": {"min": 5, "max": 1, "mean": 3, "stdev": 1}},
                )
            )
        )
        assert mgr.get_levels("src-sig") == []
        assert mgr.get_stats("src-sig") == FALLBACK_STATS

    def test_fallback_stats(self, manager: MetaDataManager) -> None:
        assert manager.get_stats("doctor-visits-smoothed_cli") == FALLBACK_STATS
        assert manager.get_stats("nope-nothing") == FALLBACK_STATS

    def test_custom_fallback_stats(self, raw_metadata: list[dict]) -> None:
        fallback = EpiDataMetaStatsInfo(min=0, max=10, mean=5, stdev=1)
        mgr = MetaDataManager(raw_metadata, fallback_stats=fallback)
        assert mgr.get_value_domain("doctor-visits-smoothed_cli") == [2, 8]


class TestValueDomain:
    """Tests for raw and display-scaled value domains."""

    def test_rate(self, manager: MetaDataManager) -> None:
        assert manager.get_value_domain("jhu-csse-confirmed_incidence_prop") == [4, 16]

    def test_count_per_level(self, manager: MetaDataManager) -> None:
        assert manager.get_value_domain("jhu-csse-confirmed_incidence_num") == [COUNT_SIGNAL_FLOOR, 110]
        assert manager.get_value_domain("jhu-csse-confirmed_incidence_num", "state") == [COUNT_SIGNAL_FLOOR, 3100]

    def test_custom_count_floor(self, raw_metadata: list[dict]) -> None:
        mgr = MetaDataManager(raw_metadata, count_floor=1)
        assert mgr.get_value_domain("jhu-csse-confirmed_incidence_num") == [1, 110]

    def test_extended(self, manager: MetaDataManager) -> None:
        assert manager.get_value_domain("jhu-csse-confirmed_incidence_prop", extended=True) == [4, 16, 22]

    def test_unknown_sensor_uses_fallback(self, manager: MetaDataManager) -> None:
        assert manager.get_value_domain(_Ref("nope", "nothing")) == [20, 80]

    def test_scaled_fraction(self) -> None:
        mgr = MetaDataManager(
            _single_source(
                make_signal(
                    "src",
                    "frac",
                    format="fraction",
                    geo_types={"county": {"min": 0, "max": 1, "mean": 0.3, "stdev": 0.2}},
                )
            )
        )
        assert mgr.scaled_value_domain("src-frac") == pytest.approx([0, 90])
        assert mgr.scaled_value_domain("src-frac", extended=True) == pytest.approx([0, 90, 100])

    def test_scaled_per100k_clamped(self) -> None:
        mgr = MetaDataManager(
            _single_source(
                make_signal(
                    "src",
                    "rate",
                    format="per100k",
                    geo_types={"county": {"min": 0, "max": 200_000, "mean": 50_000, "stdev": 30_000}},
                )
            )
        )
        assert mgr.scaled_value_domain("src-rate") == [0, 100_000]

    def test_scaled_raw_unclamped(self, manager: MetaDataManager) -> None:
        assert manager.scaled_value_domain("doctor-visits-weekly_cli") == [0, 6]

    def test_scaled_unknown_sensor(self, manager: MetaDataManager) -> None:
        with pytest.raises(SensorNotFound):
            manager.scaled_value_domain("nope-nothing")

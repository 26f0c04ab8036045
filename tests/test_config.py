"""Tests for settings and logging setup."""

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from epidata_signals import logging_config
from epidata_signals.config import Settings, get_settings
from epidata_signals.logging_config import LOG_FORMAT, configure_logging


class TestSettings:
    """Verify defaults and environment overrides."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in ("EPIDATA_ENDPOINT_URL", "REQUEST_TIMEOUT", "MAX_GET_URL_LENGTH", "CORRELATION_LAG_WINDOW"):
            monkeypatch.delenv(var, raising=False)
        s = Settings(_env_file=None)
        assert s.epidata_endpoint_url == "https://api.delphi.cmu.edu/epidata"
        assert s.request_timeout == 30.0
        assert s.max_get_url_length == 4096
        assert s.correlation_lag_window == 28
        assert s.log_level == "INFO"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EPIDATA_ENDPOINT_URL", "http://localhost:8080/epidata")
        monkeypatch.setenv("CORRELATION_LAG_WINDOW", "14")
        s = Settings(_env_file=None)
        assert s.epidata_endpoint_url == "http://localhost:8080/epidata"
        assert s.correlation_lag_window == 14

    def test_negative_window_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CORRELATION_LAG_WINDOW", "-1")
        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_cached(self) -> None:
        assert get_settings() is get_settings()


class TestConfigureLogging:
    """Verify root logger setup."""

    @pytest.fixture
    def bare_root(self, monkeypatch: pytest.MonkeyPatch) -> logging.Logger:
        """Fresh root logger seen only by ``configure_logging``.

        The process root logger carries pytest's capture handlers, which would
        make ``configure_logging`` return early.
        """
        root = logging.RootLogger(logging.WARNING)
        scoped = SimpleNamespace(
            getLogger=lambda name=None: root,
            StreamHandler=logging.StreamHandler,
            Formatter=logging.Formatter,
        )
        monkeypatch.setattr(logging_config, "logging", scoped)
        return root

    def test_adds_console_handler(self, bare_root: logging.Logger) -> None:
        configure_logging("DEBUG")
        assert len(bare_root.handlers) == 1
        handler = bare_root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.formatter is not None
        assert handler.formatter._fmt == LOG_FORMAT
        assert bare_root.level == logging.DEBUG

    def test_idempotent(self, bare_root: logging.Logger) -> None:
        configure_logging("INFO")
        configure_logging("DEBUG")
        assert len(bare_root.handlers) == 1
        assert bare_root.level == logging.INFO

    def test_level_from_settings(self, bare_root: logging.Logger) -> None:
        configure_logging()
        assert bare_root.level == logging.getLevelName(get_settings().log_level.upper())

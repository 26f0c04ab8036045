"""Shared logging configuration.

Call ``configure_logging()`` once at an entry point (script, notebook, service)
to get log output. The function is idempotent: if the root logger already has
handlers, it does nothing.
"""

from __future__ import annotations

import logging

from epidata_signals.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int | str | None = None) -> None:
    """Configure the root logger with a console handler.

    Args:
        level: Log level; defaults to ``Settings.log_level``.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console)

    if level is None:
        level = get_settings().log_level.upper()
    root.setLevel(level)

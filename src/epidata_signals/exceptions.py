"""Error taxonomy shared across the library."""

from __future__ import annotations


class EpidataError(Exception):
    """Base error for all epidata-signals exceptions."""


# ---- Parsing ----
class MalformedDate(EpidataError, ValueError):
    """Raised when a ``YYYYMMDD`` / ``YYYYWW`` code cannot be decoded."""


# ---- Remote access ----
class TransportFailure(EpidataError):
    """Raised when the HTTP request itself fails.

    The underlying ``requests`` exception is kept as ``__cause__``.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# ---- Catalog integrity ----
class DuplicateSensorKey(EpidataError, ValueError):
    """Raised when two signals derive the same ``source-signal`` key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Duplicate sensor key in metadata: {key}")
        self.key = key


class SensorNotFound(EpidataError, KeyError):
    """Raised when a required sensor is not present in the catalog."""


# ---- Analysis ----
class InsufficientOverlap(EpidataError, ValueError):
    """Raised when two series do not overlap enough to correlate."""

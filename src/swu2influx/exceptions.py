"""Custom exception hierarchy for swu2influx."""

from __future__ import annotations


class Swu2InfluxError(Exception):
    """Base exception for all swu2influx errors."""


class ConfigError(Swu2InfluxError):
    """Invalid or missing configuration."""


class CycleError(Swu2InfluxError):
    """Failure that aborts the current poll cycle only."""


class ProtocolError(CycleError):
    """Session tokens could not be extracted from the landing page.

    The upstream page shape changed; the data endpoint cannot be called
    without both tokens.
    """


class NetworkError(CycleError):
    """HTTP-level failure (connection error, non-success status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class DecodeError(CycleError):
    """Payload is malformed or does not contain the marker collection."""


class SinkWriteError(Swu2InfluxError):
    """A single point could not be written to the time-series database."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message)

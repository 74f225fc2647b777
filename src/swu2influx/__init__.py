"""swu2influx - poll SWU real-time vehicle positions into InfluxDB."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("swu2influx")
except PackageNotFoundError:
    __version__ = "0+local"
from swu2influx.config import CycleErrorPolicy, FeedVersion, Swu2InfluxConfig, WriteErrorPolicy
from swu2influx.exceptions import (
    ConfigError,
    CycleError,
    DecodeError,
    NetworkError,
    ProtocolError,
    SinkWriteError,
    Swu2InfluxError,
)
from swu2influx.models import InfluxPoint, PositionSample
from swu2influx.poller import CycleReport, CycleState, PollContext, Poller
from swu2influx.session import SessionTokens, parse_session_tokens

__all__ = [
    "__version__",
    "ConfigError",
    "CycleError",
    "CycleErrorPolicy",
    "CycleReport",
    "CycleState",
    "DecodeError",
    "FeedVersion",
    "InfluxPoint",
    "NetworkError",
    "PollContext",
    "Poller",
    "PositionSample",
    "ProtocolError",
    "SessionTokens",
    "SinkWriteError",
    "Swu2InfluxConfig",
    "Swu2InfluxError",
    "WriteErrorPolicy",
    "parse_session_tokens",
]

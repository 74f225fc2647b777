"""Runtime configuration for swu2influx."""

from __future__ import annotations

import dataclasses
import enum
import os
from typing import Any, TypeVar

from swu2influx._constants import (
    BASE_URL,
    DEFAULT_DATABASE,
    DEFAULT_INFLUX_PORT,
    DEFAULT_MEASUREMENT,
    DEFAULT_POLL_INTERVAL,
    JSON_DATA_PATH,
    XML_DATA_PATH,
)
from swu2influx.exceptions import ConfigError

TEnum = TypeVar("TEnum", bound=enum.Enum)


class FeedVersion(enum.StrEnum):
    """Upstream payload format, pinned by the data endpoint path."""

    XML = "xml"
    JSON = "json"

    @property
    def data_path(self) -> str:
        return XML_DATA_PATH if self is FeedVersion.XML else JSON_DATA_PATH


class CycleErrorPolicy(enum.StrEnum):
    """What the poll loop does after a cycle aborted."""

    CONTINUE = "continue"
    TERMINATE = "terminate"


class WriteErrorPolicy(enum.StrEnum):
    """What happens after a per-marker write failed."""

    LOG = "log"
    TERMINATE = "terminate"


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _parse_enum(enum_cls: type[TEnum], value: Any, name: str) -> TEnum:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(str(member.value) for member in enum_cls)
        raise ConfigError(f"{name} must be one of {choices}, got {value!r}") from exc


def _parse_number(cast: type[int] | type[float], value: str, name: str) -> Any:
    try:
        return cast(value)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class Swu2InfluxConfig:
    """Poller configuration.

    Parameters
    ----------
    influx_host : str
        InfluxDB host name.
    influx_port : int
        InfluxDB HTTP port.
    influx_user : str
        InfluxDB user, empty for unauthenticated servers.
    influx_password : str
        InfluxDB password.
    influx_ssl : bool
        Talk HTTPS to InfluxDB.
    database : str
        Target database, created on startup when missing.
    measurement : str
        Measurement every position sample is written to.
    base_url : str
        Portal base URL; the landing page is fetched from here.
    feed_version : FeedVersion
        Which payload format (and endpoint) to use.
    data_path : str or None
        Data endpoint path override. ``None`` uses the path pinned for
        ``feed_version``.
    poll_interval : float
        Seconds to sleep between cycles.
    on_cycle_error : CycleErrorPolicy
        Keep polling or terminate after a bootstrap/fetch/decode failure.
    on_write_error : WriteErrorPolicy
        Log or terminate after a failed point write.
    """

    influx_host: str = "localhost"
    influx_port: int = DEFAULT_INFLUX_PORT
    influx_user: str = ""
    influx_password: str = ""
    influx_ssl: bool = False
    database: str = DEFAULT_DATABASE
    measurement: str = DEFAULT_MEASUREMENT
    base_url: str = BASE_URL
    feed_version: FeedVersion = FeedVersion.XML
    data_path: str | None = None
    poll_interval: float = DEFAULT_POLL_INTERVAL
    on_cycle_error: CycleErrorPolicy = CycleErrorPolicy.CONTINUE
    on_write_error: WriteErrorPolicy = WriteErrorPolicy.TERMINATE

    def __post_init__(self) -> None:
        # Accept plain strings for the enum fields (env values, CLI args).
        object.__setattr__(self, "feed_version", _parse_enum(FeedVersion, self.feed_version, "feed_version"))
        object.__setattr__(
            self, "on_cycle_error", _parse_enum(CycleErrorPolicy, self.on_cycle_error, "on_cycle_error")
        )
        object.__setattr__(
            self, "on_write_error", _parse_enum(WriteErrorPolicy, self.on_write_error, "on_write_error")
        )
        if self.poll_interval < 0:
            raise ConfigError(f"poll_interval must not be negative, got {self.poll_interval}")

    @property
    def data_url(self) -> str:
        """Full URL of the marker data endpoint."""
        path = self.data_path if self.data_path else self.feed_version.data_path
        return f"{self.base_url}{path}"

    @property
    def influx_url(self) -> str:
        scheme = "https" if self.influx_ssl else "http"
        return f"{scheme}://{self.influx_host}:{self.influx_port}"

    @classmethod
    def from_env(cls, **overrides: Any) -> Swu2InfluxConfig:
        """Create configuration from environment variables.

        Reads the ``INFLUXDB_*`` connection variables and the ``SWU_*``
        poller settings. Explicit keyword arguments override environment
        values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "INFLUXDB_HOST": "influx_host",
            "INFLUXDB_USER": "influx_user",
            "INFLUXDB_PASSWORD": "influx_password",
            "INFLUXDB_DATABASE": "database",
            "INFLUXDB_MEASUREMENT": "measurement",
            "SWU_BASE_URL": "base_url",
            "SWU_FEED_VERSION": "feed_version",
            "SWU_DATA_PATH": "data_path",
            "SWU_ON_CYCLE_ERROR": "on_cycle_error",
            "SWU_ON_WRITE_ERROR": "on_write_error",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        port_env = env.get("INFLUXDB_PORT")
        if port_env is not None and "influx_port" not in overrides:
            config_kwargs["influx_port"] = _parse_number(int, port_env, "INFLUXDB_PORT")

        interval_env = env.get("SWU_POLL_INTERVAL")
        if interval_env is not None and "poll_interval" not in overrides:
            config_kwargs["poll_interval"] = _parse_number(float, interval_env, "SWU_POLL_INTERVAL")

        if "influx_ssl" not in overrides:
            config_kwargs["influx_ssl"] = _env_bool(env.get("INFLUXDB_SSL"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

"""InfluxDB sink.

Talks to the InfluxDB 1.x HTTP API: ``/query`` for database management
and ``/write`` for points.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import aiohttp

from swu2influx._line_protocol import encode_point
from swu2influx._redact import redact_for_log
from swu2influx.config import Swu2InfluxConfig
from swu2influx.exceptions import SinkWriteError
from swu2influx.models.point import InfluxPoint

_logger = logging.getLogger(__name__)


class PointSink(Protocol):
    """Time-series write interface used by the poller."""

    async def ensure_database(self) -> None:
        ...

    async def write_point(self, point: InfluxPoint) -> None:
        ...


def _quote_identifier(name: str) -> str:
    return '"' + name.replace("\\", "\\\\").replace('"', '\\"') + '"'


class InfluxHttpSink:
    """:class:`PointSink` backed by the InfluxDB 1.x HTTP API.

    The aiohttp session is long-lived and shared; the sink never mutates
    it, so concurrent writes are safe.
    """

    def __init__(self, config: Swu2InfluxConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def _params(self, **extra: str) -> dict[str, str]:
        params: dict[str, str] = {}
        if self._config.influx_user:
            params["u"] = self._config.influx_user
            params["p"] = self._config.influx_password
        params.update(extra)
        return params

    async def _query(self, method: str, statement: str) -> dict[str, Any]:
        url = f"{self._config.influx_url}/query"
        params = self._params(q=statement)
        _logger.debug("%s %s %s", method, url, redact_for_log(params))
        try:
            async with self._http.request(method, url, params=params) as resp:
                if resp.status != 200:
                    text = await resp.text(errors="replace")
                    raise SinkWriteError(
                        f"InfluxDB query {statement!r} failed: HTTP {resp.status}: {text[:200]}",
                        status_code=resp.status,
                    )
                body: Any = await resp.json(content_type=None)
        except SinkWriteError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise SinkWriteError(f"InfluxDB query {statement!r} failed: {exc}") from exc
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError, e.g. a proxy answering with HTML
            raise SinkWriteError(f"InfluxDB query {statement!r} returned no JSON: {exc}") from exc

        if not isinstance(body, dict):
            raise SinkWriteError(
                f"InfluxDB query {statement!r} returned {type(body).__name__}, expected an object"
            )
        for result in body.get("results", []):
            if "error" in result:
                raise SinkWriteError(f"InfluxDB query {statement!r} failed: {result['error']}")
        return body

    async def database_names(self) -> list[str]:
        body = await self._query("GET", "SHOW DATABASES")
        names: list[str] = []
        for result in body.get("results", []):
            for series in result.get("series", []):
                names.extend(str(row[0]) for row in series.get("values", []) if row)
        return names

    async def ensure_database(self) -> None:
        """Create the configured database unless it already exists."""
        database = self._config.database
        if database in await self.database_names():
            _logger.debug("Database %s exists", database)
            return
        _logger.info("Creating database %s", database)
        await self._query("POST", f"CREATE DATABASE {_quote_identifier(database)}")

    async def write_point(self, point: InfluxPoint) -> None:
        try:
            line = encode_point(point)
        except ValueError as exc:
            raise SinkWriteError(f"Cannot encode point: {exc}") from exc

        url = f"{self._config.influx_url}/write"
        params = self._params(db=self._config.database)
        try:
            async with self._http.post(url, params=params, data=line.encode("utf-8")) as resp:
                if resp.status != 204:
                    text = await resp.text(errors="replace")
                    raise SinkWriteError(
                        f"InfluxDB write failed: HTTP {resp.status}: {text[:200]}",
                        status_code=resp.status,
                    )
        except SinkWriteError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise SinkWriteError(f"InfluxDB write failed: {exc}") from exc

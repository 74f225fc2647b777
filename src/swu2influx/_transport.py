"""HTTP transport for the SWU real-time portal."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol

import aiohttp

from swu2influx._constants import USER_AGENT
from swu2influx._redact import redact_for_log
from swu2influx.exceptions import DecodeError, NetworkError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the portal endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_text(self, url: str) -> str:
        ...

    async def post_form(self, url: str, data: Mapping[str, str]) -> str:
        ...


class HttpTransport:
    """aiohttp transport returning response bodies as text.

    No retries: a failed request aborts the poll cycle and the next cycle
    starts from scratch.
    """

    def __init__(self, http_session: aiohttp.ClientSession) -> None:
        self._http = http_session
        self._headers = {"user-agent": USER_AGENT}

    async def get_text(self, url: str) -> str:
        _logger.debug("GET %s", url)
        return await self._request("GET", url)

    async def post_form(self, url: str, data: Mapping[str, str]) -> str:
        """POST *data* form-encoded and return the body."""
        _logger.debug("POST %s %s", url, redact_for_log(dict(data)))
        return await self._request("POST", url, data=dict(data))

    async def _request(self, method: str, url: str, data: dict[str, str] | None = None) -> str:
        try:
            async with self._http.request(method, url, data=data, headers=self._headers) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise NetworkError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                    )
        except NetworkError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise NetworkError(f"{method} {url} failed: {exc}", url=url) from exc
        except UnicodeDecodeError as exc:
            raise DecodeError(f"{method} {url} returned undecodable text: {exc}") from exc

        _logger.debug("%s %s -> %d chars", method, url, len(text))
        return text

"""Test doubles shared by the HTTP-level tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import aiohttp


class FakeResponse:
    def __init__(
        self,
        status: int = 200,
        text: str = "",
        json_body: Any = None,
        error: Exception | None = None,
    ) -> None:
        self.status = status
        self._text = text
        self._json = json_body
        self._error = error

    async def text(self, errors: str = "strict") -> str:
        if self._error is not None and errors == "strict":
            raise self._error
        return self._text

    async def json(self, content_type: str | None = "application/json") -> Any:
        if self._error is not None:
            raise self._error
        return self._json

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


@dataclass
class FakeHttpSession:
    """Just enough of :class:`aiohttp.ClientSession` for the transport and sink."""

    responses: list[FakeResponse | Exception] = field(default_factory=list)
    calls: list[dict[str, Any]] = field(default_factory=list)

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("POST", url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("GET", url, **kwargs)


def client_error(message: str = "connection reset") -> aiohttp.ClientError:
    return aiohttp.ClientConnectionError(message)

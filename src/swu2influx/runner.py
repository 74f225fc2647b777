"""Wiring of the production poll context."""

from __future__ import annotations

import asyncio

import aiohttp

from swu2influx._notify import SystemdNotifier
from swu2influx._transport import HttpTransport
from swu2influx.config import Swu2InfluxConfig
from swu2influx.poller import PollContext, Poller
from swu2influx.sink import InfluxHttpSink


async def run(
    config: Swu2InfluxConfig,
    *,
    stop_event: asyncio.Event | None = None,
    max_cycles: int | None = None,
    http_session: aiohttp.ClientSession | None = None,
) -> None:
    """Poll the portal into InfluxDB until stopped.

    One aiohttp session serves both the portal transport and the sink.
    """
    if http_session is None:
        async with aiohttp.ClientSession() as session:
            await run(config, stop_event=stop_event, max_cycles=max_cycles, http_session=session)
        return

    context = PollContext(
        config=config,
        transport=HttpTransport(http_session),
        sink=InfluxHttpSink(config, http_session),
        notifier=SystemdNotifier(),
    )
    await Poller(context).run(stop_event, max_cycles=max_cycles)

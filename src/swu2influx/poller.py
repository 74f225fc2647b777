"""Poll loop: bootstrap, fetch, decode, normalize and write, forever."""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field

from swu2influx._api.markers import fetch_markers_payload
from swu2influx._api.portal import fetch_session_tokens
from swu2influx._notify import SystemdNotifier
from swu2influx._transport import Transport
from swu2influx.config import CycleErrorPolicy, Swu2InfluxConfig
from swu2influx.exceptions import CycleError
from swu2influx.ingestion.decode import MarkerDecoder, get_decoder
from swu2influx.ingestion.markers import MarkerFieldMap, get_field_map, normalize_markers
from swu2influx.sink import PointSink
from swu2influx.writer import write_samples

_logger = logging.getLogger(__name__)


class CycleState(enum.StrEnum):
    IDLE = "idle"
    BOOTSTRAPPING = "bootstrapping"
    FETCHING = "fetching"
    DECODING = "decoding"
    WRITING = "writing"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


@dataclass(frozen=True)
class CycleReport:
    """Outcome of one completed cycle."""

    markers: int
    written: int
    failed: int

    @property
    def skipped(self) -> int:
        """Markers that could not be normalized."""
        return self.markers - self.written - self.failed


@dataclass
class PollContext:
    """Everything a cycle needs, built once at startup.

    Decoder and field map default to the ones pinned for
    ``config.feed_version``.
    """

    config: Swu2InfluxConfig
    transport: Transport
    sink: PointSink
    decoder: MarkerDecoder | None = None
    field_map: MarkerFieldMap | None = None
    notifier: SystemdNotifier = field(default_factory=SystemdNotifier)

    def __post_init__(self) -> None:
        if self.decoder is None:
            self.decoder = get_decoder(self.config.feed_version)
        if self.field_map is None:
            self.field_map = get_field_map(self.config.feed_version)


class Poller:
    """Runs poll cycles sequentially.

    Usage::

        poller = Poller(context)
        await poller.run(stop_event)
    """

    def __init__(self, context: PollContext) -> None:
        self._ctx = context
        self.state = CycleState.IDLE
        self.cycles = 0

    def _enter(self, state: CycleState) -> None:
        _logger.debug("%s -> %s", self.state, state)
        self.state = state

    async def run_cycle(self) -> CycleReport:
        """One bootstrap/fetch/decode/normalize/write pass.

        Raises :class:`CycleError` subclasses when the cycle aborts before
        writing, and :class:`SinkWriteError` under the terminating write
        policy.
        """
        ctx = self._ctx
        assert ctx.decoder is not None and ctx.field_map is not None  # noqa: S101

        self._enter(CycleState.BOOTSTRAPPING)
        tokens = await fetch_session_tokens(ctx.transport, ctx.config)

        self._enter(CycleState.FETCHING)
        payload = await fetch_markers_payload(ctx.transport, ctx.config, tokens)

        self._enter(CycleState.DECODING)
        markers = ctx.decoder.decode(payload)

        self._enter(CycleState.WRITING)
        samples = normalize_markers(markers, ctx.field_map)
        written, failed = await write_samples(
            ctx.sink,
            samples,
            ctx.config.measurement,
            ctx.config.on_write_error,
        )
        return CycleReport(markers=len(markers), written=written, failed=failed)

    async def _sleep(self, stop_event: asyncio.Event) -> None:
        self._enter(CycleState.SLEEPING)
        try:
            await asyncio.wait_for(stop_event.wait(), self._ctx.config.poll_interval)
        except TimeoutError:
            pass

    async def run(self, stop_event: asyncio.Event | None = None, max_cycles: int | None = None) -> None:
        """Poll until *stop_event* is set or *max_cycles* cycles ran.

        Creates the target database once before the first cycle.
        """
        if stop_event is None:
            stop_event = asyncio.Event()
        ctx = self._ctx

        await ctx.sink.ensure_database()
        ctx.notifier.ready()
        _logger.info(
            "Polling %s every %ss into %s/%s",
            ctx.config.data_url,
            ctx.config.poll_interval,
            ctx.config.database,
            ctx.config.measurement,
        )

        try:
            while not stop_event.is_set():
                self.cycles += 1
                try:
                    report = await self.run_cycle()
                except CycleError:
                    _logger.exception("Cycle %d aborted in state %s", self.cycles, self.state)
                    if ctx.config.on_cycle_error is CycleErrorPolicy.TERMINATE:
                        raise
                else:
                    ctx.notifier.watchdog()
                    _logger.info(
                        "Cycle %d: %d markers, %d written, %d failed, %d skipped",
                        self.cycles,
                        report.markers,
                        report.written,
                        report.failed,
                        report.skipped,
                    )

                if max_cycles is not None and self.cycles >= max_cycles:
                    break
                await self._sleep(stop_event)
        finally:
            self._enter(CycleState.STOPPED)
            ctx.notifier.stopping()

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field

import pytest

from swu2influx._notify import SystemdNotifier
from swu2influx.config import CycleErrorPolicy, FeedVersion, Swu2InfluxConfig, WriteErrorPolicy
from swu2influx.exceptions import DecodeError, NetworkError, ProtocolError, SinkWriteError
from swu2influx.models.point import InfluxPoint
from swu2influx.poller import CycleState, PollContext, Poller

LANDING_PAGE = "<script>var request = 123; var state = 456;</script>"

XML_PAYLOAD = """<markers>
  <marker fzg="47" linie="2" uml="203" lat="48.39841" lng="9.99155" ac="J" wifi="N"
          schedule="+ 03:30" ziel="Kuhberg" fw="12" typ="Strab" />
  <marker fzg="abc" linie="4" uml="401" lat="4.840112" lng="9.98731" ac="N" wifi="J"
          schedule="ab: 14:05" ziel="" fw="3" typ="Bus" />
</markers>"""

JSON_PAYLOAD = """[
  {"Fzg": "1104", "Linie": "5", "Lat": 48.4011, "Lng": 9.9873, "Abweichung": "- 03:20",
   "Typ": "Bus", "Variante": "", "Aktiv": "true"}
]"""


@dataclass
class FakePortal:
    landing_pages: list[str | Exception] = field(default_factory=lambda: [LANDING_PAGE])
    payload: str = XML_PAYLOAD
    gets: int = 0
    posts: list[dict[str, str]] = field(default_factory=list)

    async def get_text(self, url: str) -> str:
        page = self.landing_pages[min(self.gets, len(self.landing_pages) - 1)]
        self.gets += 1
        if isinstance(page, Exception):
            raise page
        return page

    async def post_form(self, url: str, data: Mapping[str, str]) -> str:
        self.posts.append(dict(data))
        return self.payload


@dataclass
class FakeSink:
    failing_vehicles: set[int] = field(default_factory=set)
    points: list[InfluxPoint] = field(default_factory=list)
    ensured: int = 0

    async def ensure_database(self) -> None:
        self.ensured += 1

    async def write_point(self, point: InfluxPoint) -> None:
        if point.tags.get("vehicle") in self.failing_vehicles:
            raise SinkWriteError("HTTP 500", status_code=500)
        self.points.append(point)


class RecordingNotifier(SystemdNotifier):
    def __init__(self) -> None:
        super().__init__(address="")
        self.states: list[str] = []

    def notify(self, state: str) -> None:
        self.states.append(state)


def _context(
    portal: FakePortal,
    sink: FakeSink,
    notifier: SystemdNotifier | None = None,
    **config: object,
) -> PollContext:
    return PollContext(
        config=Swu2InfluxConfig(poll_interval=0, **config),  # type: ignore[arg-type]
        transport=portal,
        sink=sink,
        notifier=notifier or RecordingNotifier(),
    )


@pytest.mark.asyncio
async def test_run_cycle_end_to_end_xml() -> None:
    portal = FakePortal()
    sink = FakeSink()
    poller = Poller(_context(portal, sink))

    report = await poller.run_cycle()

    assert (report.markers, report.written, report.failed, report.skipped) == (2, 2, 0, 0)
    assert portal.posts == [{"request": "123", "state": "456"}]
    first, second = sorted(sink.points, key=lambda p: p.tags["route"])  # type: ignore[arg-type, return-value]
    assert first.tags["vehicle"] == 47
    assert first.fields == {"lat": 48.39841, "long": 9.99155, "delay": 210}
    assert "vehicle" not in second.tags
    assert "destination" not in second.tags
    assert "delay" not in second.fields
    assert second.fields["lat"] == pytest.approx(48.40112)
    assert second.tags["type"] == "bus"


@pytest.mark.asyncio
async def test_run_cycle_end_to_end_json() -> None:
    portal = FakePortal(payload=JSON_PAYLOAD)
    sink = FakeSink()
    poller = Poller(_context(portal, sink, feed_version=FeedVersion.JSON))

    await poller.run_cycle()

    (point,) = sink.points
    assert point.fields["delay"] == -200
    assert point.tags["active"] is True
    assert "variant" not in point.tags


@pytest.mark.asyncio
async def test_run_bounded_cycles_rebootstraps_every_cycle() -> None:
    portal = FakePortal()
    sink = FakeSink()
    notifier = RecordingNotifier()
    poller = Poller(_context(portal, sink, notifier))

    await poller.run(max_cycles=3)

    assert sink.ensured == 1
    assert portal.gets == 3
    assert len(sink.points) == 6
    assert poller.state is CycleState.STOPPED
    assert notifier.states == ["READY=1", "WATCHDOG=1", "WATCHDOG=1", "WATCHDOG=1", "STOPPING=1"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [
        "<html>no tokens</html>",
        NetworkError("HTTP 502", status_code=502),
        DecodeError("GET returned undecodable text"),
    ],
)
async def test_cycle_error_continue_policy_keeps_polling(failure: str | Exception) -> None:
    portal = FakePortal(landing_pages=[failure, LANDING_PAGE])
    sink = FakeSink()
    poller = Poller(_context(portal, sink, on_cycle_error=CycleErrorPolicy.CONTINUE))

    await poller.run(max_cycles=2)

    assert poller.cycles == 2
    assert len(sink.points) == 2


@pytest.mark.asyncio
async def test_cycle_error_terminate_policy_raises() -> None:
    portal = FakePortal(landing_pages=["<html>no tokens</html>"])
    sink = FakeSink()
    notifier = RecordingNotifier()
    poller = Poller(_context(portal, sink, notifier, on_cycle_error=CycleErrorPolicy.TERMINATE))

    with pytest.raises(ProtocolError):
        await poller.run(max_cycles=5)

    assert poller.cycles == 1
    assert notifier.states == ["READY=1", "STOPPING=1"]


@pytest.mark.asyncio
async def test_decode_error_aborts_cycle() -> None:
    portal = FakePortal(payload="<markers><marker></markers>")
    poller = Poller(_context(portal, FakeSink()))

    with pytest.raises(DecodeError):
        await poller.run_cycle()

    assert poller.state is CycleState.DECODING


@pytest.mark.asyncio
async def test_write_failure_lenient_policy_keeps_siblings() -> None:
    sink = FakeSink(failing_vehicles={47})
    poller = Poller(_context(FakePortal(), sink, on_write_error=WriteErrorPolicy.LOG))

    report = await poller.run_cycle()

    assert (report.written, report.failed) == (1, 1)
    assert len(sink.points) == 1


@pytest.mark.asyncio
async def test_write_failure_strict_policy_is_fatal() -> None:
    sink = FakeSink(failing_vehicles={47})
    poller = Poller(
        _context(
            FakePortal(),
            sink,
            on_write_error=WriteErrorPolicy.TERMINATE,
            on_cycle_error=CycleErrorPolicy.CONTINUE,
        )
    )

    with pytest.raises(SinkWriteError):
        await poller.run(max_cycles=3)

    # the sibling write still happened
    assert len(sink.points) == 1


@pytest.mark.asyncio
async def test_stop_event_interrupts_sleep() -> None:
    portal = FakePortal()
    sink = FakeSink()
    context = PollContext(
        config=Swu2InfluxConfig(poll_interval=3600),
        transport=portal,
        sink=sink,
        notifier=RecordingNotifier(),
    )
    poller = Poller(context)
    stop_event = asyncio.Event()

    task = asyncio.create_task(poller.run(stop_event))
    while poller.state is not CycleState.SLEEPING:
        await asyncio.sleep(0)
    stop_event.set()
    await asyncio.wait_for(task, timeout=1)

    assert poller.cycles == 1
    assert poller.state is CycleState.STOPPED

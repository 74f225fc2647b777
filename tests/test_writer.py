from __future__ import annotations

import asyncio

import pytest

from swu2influx.config import WriteErrorPolicy
from swu2influx.exceptions import SinkWriteError
from swu2influx.models.point import InfluxPoint
from swu2influx.models.position import PositionSample
from swu2influx.writer import write_samples


class _FlakySink:
    """Fails every point for the given vehicle ids, records the rest."""

    def __init__(self, failing: set[int]) -> None:
        self._failing = failing
        self.points: list[InfluxPoint] = []

    async def ensure_database(self) -> None:
        return None

    async def write_point(self, point: InfluxPoint) -> None:
        # Let every write start before any of them settles.
        await asyncio.sleep(0)
        if point.tags.get("vehicle") in self._failing:
            raise SinkWriteError("HTTP 500", status_code=500)
        self.points.append(point)


def _samples(*vehicle_ids: int) -> list[PositionSample]:
    return [
        PositionSample(latitude=48.4, longitude=9.99, vehicle_id=vehicle_id, vehicle_type="bus")
        for vehicle_id in vehicle_ids
    ]


@pytest.mark.asyncio
async def test_failed_write_does_not_block_siblings() -> None:
    sink = _FlakySink(failing={2})

    written, failed = await write_samples(sink, _samples(1, 2, 3), "position", WriteErrorPolicy.LOG)

    assert (written, failed) == (2, 1)
    assert sorted(p.tags["vehicle"] for p in sink.points) == [1, 3]  # type: ignore[type-var]
    assert all(p.measurement == "position" for p in sink.points)


@pytest.mark.asyncio
async def test_terminate_policy_raises_after_all_writes_settled() -> None:
    sink = _FlakySink(failing={1})

    with pytest.raises(SinkWriteError):
        await write_samples(sink, _samples(1, 2, 3), "position", WriteErrorPolicy.TERMINATE)

    assert sorted(p.tags["vehicle"] for p in sink.points) == [2, 3]  # type: ignore[type-var]


@pytest.mark.asyncio
async def test_no_samples_is_a_noop() -> None:
    sink = _FlakySink(failing=set())

    assert await write_samples(sink, [], "position") == (0, 0)


@pytest.mark.asyncio
async def test_unexpected_errors_propagate() -> None:
    class _BrokenSink(_FlakySink):
        async def write_point(self, point: InfluxPoint) -> None:
            raise RuntimeError("bug")

    with pytest.raises(RuntimeError, match="bug"):
        await write_samples(_BrokenSink(set()), _samples(1), "position")

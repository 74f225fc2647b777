"""Fan-out of position samples to the sink."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from swu2influx.config import WriteErrorPolicy
from swu2influx.exceptions import SinkWriteError
from swu2influx.models.position import PositionSample
from swu2influx.sink import PointSink

_logger = logging.getLogger(__name__)


async def write_samples(
    sink: PointSink,
    samples: Sequence[PositionSample],
    measurement: str,
    policy: WriteErrorPolicy = WriteErrorPolicy.LOG,
) -> tuple[int, int]:
    """Write one point per sample concurrently.

    Every write settles before this returns, so one failed write never
    stops its siblings. Returns ``(written, failed)``; with
    :attr:`WriteErrorPolicy.TERMINATE` the first failure is re-raised once
    all writes settled.
    """
    results = await asyncio.gather(
        *(sink.write_point(sample.to_point(measurement)) for sample in samples),
        return_exceptions=True,
    )

    failures: list[SinkWriteError] = []
    for sample, result in zip(samples, results, strict=True):
        if result is None:
            continue
        if not isinstance(result, SinkWriteError):
            # Anything but a write error is a bug; don't hide it.
            raise result
        failures.append(result)
        _logger.warning("Failed to write vehicle %s: %s", sample.vehicle_id, result)

    written = len(samples) - len(failures)
    if failures and policy is WriteErrorPolicy.TERMINATE:
        raise failures[0]
    return written, len(failures)

"""Command line entry point: ``python -m swu2influx``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from typing import Any

from swu2influx.config import CycleErrorPolicy, FeedVersion, Swu2InfluxConfig, WriteErrorPolicy
from swu2influx.exceptions import Swu2InfluxError
from swu2influx.runner import run

_logger = logging.getLogger("swu2influx")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swu2influx",
        description="Poll SWU real-time vehicle positions into InfluxDB.",
    )
    parser.add_argument(
        "--feed-version",
        choices=[v.value for v in FeedVersion],
        help="Payload format (SWU_FEED_VERSION)",
    )
    parser.add_argument("--interval", type=float, help="Seconds between cycles (SWU_POLL_INTERVAL)")
    parser.add_argument(
        "--on-cycle-error",
        choices=[p.value for p in CycleErrorPolicy],
        help="Keep polling or exit after a failed cycle (SWU_ON_CYCLE_ERROR)",
    )
    parser.add_argument(
        "--on-write-error",
        choices=[p.value for p in WriteErrorPolicy],
        help="Log or exit after a failed write (SWU_ON_WRITE_ERROR)",
    )
    parser.add_argument("--max-cycles", type=int, help="Stop after this many cycles")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> Swu2InfluxConfig:
    overrides: dict[str, Any] = {}
    if args.feed_version is not None:
        overrides["feed_version"] = args.feed_version
    if args.interval is not None:
        overrides["poll_interval"] = args.interval
    if args.on_cycle_error is not None:
        overrides["on_cycle_error"] = args.on_cycle_error
    if args.on_write_error is not None:
        overrides["on_write_error"] = args.on_write_error
    return Swu2InfluxConfig.from_env(**overrides)


async def _main(config: Swu2InfluxConfig, max_cycles: int | None) -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)
    await run(config, stop_event=stop_event, max_cycles=max_cycles)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = config_from_args(args)
        asyncio.run(_main(config, args.max_cycles))
    except Swu2InfluxError as exc:
        _logger.error("Terminating: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

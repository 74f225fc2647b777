#!/usr/bin/env python3
"""Dump one poll cycle's markers without writing to InfluxDB.

Bootstraps a portal session, fetches the marker payload, decodes and
normalizes it, then prints the resulting samples (and optionally the raw
marker records) so feed changes are easy to spot.

Usage
-----
::

    python scripts/dump_markers.py
    python scripts/dump_markers.py --feed-version json --raw
    python scripts/dump_markers.py --json --output markers.json

Options::

    --feed-version {xml,json}   Payload format (default: SWU_FEED_VERSION or xml)
    --raw                       Also print the raw marker records
    --json                      Output as machine-readable JSON
    --output FILE               Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

import aiohttp  # noqa: E402

from swu2influx import Swu2InfluxConfig  # noqa: E402
from swu2influx._api.markers import fetch_markers_payload  # noqa: E402
from swu2influx._api.portal import fetch_session_tokens  # noqa: E402
from swu2influx._transport import HttpTransport  # noqa: E402
from swu2influx.ingestion import get_decoder, get_field_map, normalize_markers  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


async def main() -> None:
    parser = argparse.ArgumentParser(description="Dump one cycle of SWU markers for debugging.")
    parser.add_argument("--feed-version", choices=["xml", "json"], help="Payload format")
    parser.add_argument("--raw", action="store_true", help="Also print raw marker records")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.feed_version:
        overrides["feed_version"] = args.feed_version
    config = Swu2InfluxConfig.from_env(**overrides)

    async with aiohttp.ClientSession() as http:
        transport = HttpTransport(http)
        tokens = await fetch_session_tokens(transport, config)
        payload = await fetch_markers_payload(transport, config, tokens)

    markers = get_decoder(config.feed_version).decode(payload)
    samples = normalize_markers(markers, get_field_map(config.feed_version))

    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "feed_version": str(config.feed_version),
        "url": config.data_url,
        "samples": [sample.model_dump(exclude={"raw"}, exclude_none=True) for sample in samples],
    }
    if args.raw:
        result["markers"] = markers

    if args.json_mode or args.output:
        text = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(text, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(text)
        return

    out: list[str] = [_section("swu2influx dump_markers")]
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  feed      : {config.feed_version} ({config.data_url})")
    out.append(f"  markers   : {len(markers)} decoded, {len(samples)} normalized")
    out.append(_section("SAMPLES"))
    for sample in samples:
        point = sample.to_point(config.measurement)
        out.append(f"  tags={point.tags}")
        out.append(f"    fields={point.fields}")
    if args.raw:
        out.append(_section("RAW MARKERS"))
        for marker in markers:
            out.append(f"  {marker}")
    print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())

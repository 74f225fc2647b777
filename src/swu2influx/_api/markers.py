"""Marker data endpoint.

Endpoints (pinned per feed version):
  - POST ``/php/phpsqlajax_genxml.php?src=gps`` (XML)
  - POST ``/php/phpsqlajax_genjson.php?src=gps`` (JSON)
"""

from __future__ import annotations

from swu2influx._transport import Transport
from swu2influx.config import Swu2InfluxConfig
from swu2influx.session import SessionTokens


async def fetch_markers_payload(
    transport: Transport,
    config: Swu2InfluxConfig,
    tokens: SessionTokens,
) -> str:
    """POST the token pair to the data endpoint and return the raw body."""
    return await transport.post_form(config.data_url, tokens.as_form())

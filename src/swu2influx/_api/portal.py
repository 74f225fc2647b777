"""Landing page endpoint.

Endpoint:
  - GET ``/`` (HTML page embedding the session tokens)
"""

from __future__ import annotations

import logging

from swu2influx._transport import Transport
from swu2influx.config import Swu2InfluxConfig
from swu2influx.session import SessionTokens, parse_session_tokens

_logger = logging.getLogger(__name__)


async def fetch_session_tokens(transport: Transport, config: Swu2InfluxConfig) -> SessionTokens:
    """Load the landing page and extract a fresh token pair."""
    html = await transport.get_text(config.base_url)
    tokens = parse_session_tokens(html)
    _logger.debug("Bootstrapped portal session (%d byte page)", len(html))
    return tokens

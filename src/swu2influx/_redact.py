"""Helpers for safe debug logging.

Requests to the portal carry the session tokens and requests to InfluxDB
carry credentials. This module redacts those before they reach DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        # InfluxDB query parameters
        "u",
        "p",
        "password",
        # Portal session tokens
        "request",
        "state",
    }
)


def redact_for_log(params: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *params* with sensitive values replaced."""
    return {
        key: "<redacted>" if key.lower() in _SENSITIVE_VALUE_KEYS else value for key, value in params.items()
    }

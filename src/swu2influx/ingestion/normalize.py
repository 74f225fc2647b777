"""Normalization helpers.

Centralizes defensive parsing of the loosely typed marker values. None of
these raise on malformed input: unparseable numbers become ``None`` (or
NaN for coordinates) so a single bad marker never aborts a cycle.
"""

from __future__ import annotations

import math
import re
from typing import Any

from swu2influx._constants import VEHICLE_TYPES

_SCHEDULE_RE = re.compile(r"^([+-])?\s?(\d{2}):(\d{2})")

# Valid coordinates in the service area have a magnitude of at least 8
# (lat ~48, lng ~10). The feed sometimes drops leading digits.
_MIN_COORDINATE_MAGNITUDE = 8


def safe_int(value: Any) -> int | None:
    """Parse an integer tag value; floats and garbage give ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    try:
        return int(text, 10)
    except ValueError:
        return None


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def is_true_marker(value: Any, true_values: tuple[Any, ...]) -> bool:
    """Exact match against the feed's literal "true" values.

    Anything else, including a missing value, is ``False``.
    """
    if isinstance(value, bool):
        return value and any(candidate is True for candidate in true_values)
    if not isinstance(value, str):
        return False
    return value in [candidate for candidate in true_values if isinstance(candidate, str)]


def fix_location(value: Any) -> float:
    """Parse a coordinate and restore dropped leading digits.

    While the rounded magnitude is below 8 the value is multiplied by 10.
    Unparseable input gives NaN; zero and non-finite values are returned
    unchanged.
    """
    if isinstance(value, bool):
        return math.nan
    try:
        coordinate = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return math.nan
    if coordinate == 0 or not math.isfinite(coordinate):
        return coordinate
    while round(abs(coordinate)) < _MIN_COORDINATE_MAGNITUDE:
        coordinate *= 10
    return coordinate


def is_scheduled_departure(schedule: str) -> bool:
    """``ab: HH:MM`` means the trip has not started yet."""
    return schedule.startswith("ab:")


def convert_schedule_string_to_seconds(schedule: str) -> int:
    """Convert a schedule deviation such as ``'+ 03:20'`` to seconds.

    Possible values:

    * ``'ab: 14:05'``: trip departs at that time, gives 0
    * ``'+ 03:30'``: trip is late
    * ``'- 03:20'``: trip is early
    * ``'00:00'``: trip is on time
    * free text (e.g. ``'Oldtimer'``): gives 0

    The first group counts minutes and the second seconds, whatever the
    portal labels them.
    """
    if is_scheduled_departure(schedule):
        return 0

    match = _SCHEDULE_RE.match(schedule)
    if match is None:
        return 0

    delay = int(match.group(3))
    delay += int(match.group(2)) * 60

    if match.group(1) == "-":
        delay *= -1
    return delay


def translate_vehicle_type(value: str) -> str:
    return VEHICLE_TYPES.get(value, value)

"""Marker records -> :class:`PositionSample`.

The upstream key names differ between the XML and the JSON feed; a
:class:`MarkerFieldMap` describes one feed version.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from swu2influx._constants import UNKNOWN_VEHICLE_TYPE
from swu2influx.config import FeedVersion
from swu2influx.ingestion.normalize import (
    convert_schedule_string_to_seconds,
    fix_location,
    is_scheduled_departure,
    is_true_marker,
    safe_int,
    safe_str,
    translate_vehicle_type,
)
from swu2influx.models.position import PositionSample

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class MarkerFieldMap:
    """Upstream key for each sample attribute.

    A ``None`` key means the feed version has no such value and the
    attribute is always omitted.
    """

    vehicle_id: str
    route: str
    trip: str
    latitude: str
    longitude: str
    has_ac: str | None
    has_wifi: str | None
    schedule: str
    destination: str
    trip_pattern: str
    vehicle_type: str
    service_variant: str | None = None
    is_active: str | None = None
    true_values: tuple[Any, ...] = ("J",)


XML_FIELD_MAP = MarkerFieldMap(
    vehicle_id="fzg",
    route="linie",
    trip="uml",
    latitude="lat",
    longitude="lng",
    has_ac="ac",
    has_wifi="wifi",
    schedule="schedule",
    destination="ziel",
    trip_pattern="fw",
    vehicle_type="typ",
)

JSON_FIELD_MAP = MarkerFieldMap(
    vehicle_id="Fzg",
    route="Linie",
    trip="Umlauf",
    latitude="Lat",
    longitude="Lng",
    has_ac="Klima",
    has_wifi="WLAN",
    schedule="Abweichung",
    destination="Zielschild",
    trip_pattern="Fahrweg",
    vehicle_type="Typ",
    service_variant="Variante",
    is_active="Aktiv",
    true_values=("true", True),
)


def get_field_map(feed_version: FeedVersion) -> MarkerFieldMap:
    if feed_version is FeedVersion.XML:
        return XML_FIELD_MAP
    return JSON_FIELD_MAP


def _route(value: Any) -> int | str | None:
    number = safe_int(value)
    if number is not None:
        return number
    return safe_str(value)


def _flag(raw: Mapping[str, Any], key: str | None, true_values: tuple[Any, ...]) -> bool | None:
    if key is None:
        return None
    return is_true_marker(raw.get(key), true_values)


def _delay(value: Any) -> int | None:
    schedule = safe_str(value)
    if schedule is None or is_scheduled_departure(schedule):
        return None
    return convert_schedule_string_to_seconds(schedule)


def normalize_marker(raw: Mapping[str, Any], field_map: MarkerFieldMap = XML_FIELD_MAP) -> PositionSample:
    """Build the canonical sample for one marker.

    Malformed values never raise: bad numbers drop their tag, bad
    coordinates become NaN.
    """
    vehicle_type = safe_str(raw.get(field_map.vehicle_type))
    variant_key = field_map.service_variant

    return PositionSample(
        latitude=fix_location(raw.get(field_map.latitude)),
        longitude=fix_location(raw.get(field_map.longitude)),
        delay_seconds=_delay(raw.get(field_map.schedule)),
        vehicle_id=safe_int(raw.get(field_map.vehicle_id)),
        route=_route(raw.get(field_map.route)),
        trip=safe_int(raw.get(field_map.trip)),
        has_ac=_flag(raw, field_map.has_ac, field_map.true_values),
        has_wifi=_flag(raw, field_map.has_wifi, field_map.true_values),
        destination=safe_str(raw.get(field_map.destination)),
        trip_pattern=safe_int(raw.get(field_map.trip_pattern)),
        vehicle_type=translate_vehicle_type(vehicle_type) if vehicle_type else UNKNOWN_VEHICLE_TYPE,
        service_variant=safe_str(raw.get(variant_key)) if variant_key else None,
        is_active=_flag(raw, field_map.is_active, field_map.true_values),
        raw=dict(raw),
    )


def normalize_markers(
    raws: Iterable[Mapping[str, Any]],
    field_map: MarkerFieldMap = XML_FIELD_MAP,
) -> list[PositionSample]:
    """Normalize a batch, skipping (and logging) markers that cannot be built."""
    samples: list[PositionSample] = []
    for index, raw in enumerate(raws):
        try:
            samples.append(normalize_marker(raw, field_map))
        except (AttributeError, TypeError, ValidationError) as exc:
            _logger.warning("Skipping marker #%d: %s", index, exc)
    return samples

"""Canonical position sample model."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from swu2influx.models.point import InfluxPoint, Scalar


class PositionSample(BaseModel):
    """One vehicle position as it is written to InfluxDB.

    Optional attributes are ``None`` when the upstream value was empty or
    unparseable; ``None`` attributes are left out of the point entirely.

    Parameters
    ----------
    latitude : float
        Latitude in degrees, NaN when the feed value was unparseable.
    longitude : float
        Longitude in degrees, NaN when the feed value was unparseable.
    delay_seconds : int or None
        Schedule deviation, positive when late. ``None`` for trips that
        have not departed yet.
    vehicle_id : int or None
        Fleet number.
    route : int, str or None
        Line number, or the line name for non-numeric lines.
    trip : int or None
        Vehicle block ("Umlauf").
    has_ac, has_wifi : bool or None
        Equipment flags.
    destination : str or None
        Head sign text.
    trip_pattern : int or None
        Route variant ("Fahrweg").
    vehicle_type : str
        Translated vehicle type (``tram``, ``bus``, ...).
    service_variant : str or None
        Service variant, JSON feed only.
    is_active : bool or None
        Activity flag, JSON feed only.
    raw : dict
        Marker record the sample was built from.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # attribute -> InfluxDB key
    TAG_KEYS: ClassVar[dict[str, str]] = {
        "vehicle_id": "vehicle",
        "route": "route",
        "trip": "trip",
        "has_ac": "ac",
        "has_wifi": "wifi",
        "destination": "destination",
        "trip_pattern": "tripPattern",
        "vehicle_type": "type",
        "service_variant": "variant",
        "is_active": "active",
    }
    FIELD_KEYS: ClassVar[dict[str, str]] = {
        "latitude": "lat",
        "longitude": "long",
        "delay_seconds": "delay",
    }

    latitude: float
    longitude: float
    delay_seconds: int | None = None

    vehicle_id: int | None = None
    route: int | str | None = None
    trip: int | None = None
    has_ac: bool | None = None
    has_wifi: bool | None = None
    destination: str | None = None
    trip_pattern: int | None = None
    vehicle_type: str
    service_variant: str | None = None
    is_active: bool | None = None

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    def _collect(self, keys: dict[str, str]) -> dict[str, Scalar]:
        collected: dict[str, Scalar] = {}
        for attribute, key in keys.items():
            value = getattr(self, attribute)
            if value is not None:
                collected[key] = value
        return collected

    @property
    def point_tags(self) -> dict[str, Scalar]:
        return self._collect(self.TAG_KEYS)

    @property
    def point_fields(self) -> dict[str, Scalar]:
        return self._collect(self.FIELD_KEYS)

    def to_point(self, measurement: str) -> InfluxPoint:
        return InfluxPoint(measurement=measurement, tags=self.point_tags, fields=self.point_fields)

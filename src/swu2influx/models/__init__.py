"""Data models for position samples and time-series points."""

from swu2influx.models.point import InfluxPoint, Scalar
from swu2influx.models.position import PositionSample

__all__ = [
    "InfluxPoint",
    "PositionSample",
    "Scalar",
]

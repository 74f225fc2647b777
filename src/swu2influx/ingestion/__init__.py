"""Ingestion layer.

Decoders turn portal payloads into marker records; the normalizer turns
marker records into :class:`~swu2influx.models.PositionSample` objects.
"""

from swu2influx.ingestion.decode import JsonMarkerDecoder, MarkerDecoder, RawMarker, XmlMarkerDecoder, get_decoder
from swu2influx.ingestion.markers import (
    JSON_FIELD_MAP,
    XML_FIELD_MAP,
    MarkerFieldMap,
    get_field_map,
    normalize_marker,
    normalize_markers,
)

__all__ = [
    "JSON_FIELD_MAP",
    "JsonMarkerDecoder",
    "MarkerDecoder",
    "MarkerFieldMap",
    "RawMarker",
    "XML_FIELD_MAP",
    "XmlMarkerDecoder",
    "get_decoder",
    "get_field_map",
    "normalize_marker",
    "normalize_markers",
]

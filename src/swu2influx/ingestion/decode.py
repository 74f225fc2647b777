"""Payload decoders.

The portal switched from an XML payload to a JSON payload. Each format
has its own decoder; the poller picks one from the configured
:class:`~swu2influx.config.FeedVersion` and never guesses from content.
"""

from __future__ import annotations

import html
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol
from xml.parsers.expat import ExpatError

import xmltodict

from swu2influx.config import FeedVersion
from swu2influx.exceptions import DecodeError

_logger = logging.getLogger(__name__)

RawMarker = dict[str, Any]

_XML_ROOT = "markers"
_XML_MARKER = "marker"


class MarkerDecoder(Protocol):
    """Turns a raw response body into marker records, in upstream order."""

    def decode(self, text: str) -> list[RawMarker]:
        ...


def _unescape(value: Any) -> Any:
    """Decode HTML entities left in string values (e.g. ``&amp;uuml;``)."""
    if isinstance(value, str):
        return html.unescape(value)
    if isinstance(value, Mapping):
        return {key: _unescape(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_unescape(item) for item in value]
    return value


class XmlMarkerDecoder:
    """Decode ``<markers><marker attr="..."/>...</markers>`` documents.

    Attributes and text nodes end up in one flat dict per marker; attribute
    names are kept as-is (no ``@`` prefix).
    """

    def decode(self, text: str) -> list[RawMarker]:
        try:
            document = xmltodict.parse(
                text,
                attr_prefix="",
                cdata_key="#text",
                force_list=(_XML_MARKER,),
            )
        except ExpatError as exc:
            raise DecodeError(f"Malformed XML payload: {exc}") from exc

        if not isinstance(document, Mapping) or _XML_ROOT not in document:
            raise DecodeError(f"XML payload has no <{_XML_ROOT}> root")

        root = document[_XML_ROOT]
        if root is None or not isinstance(root, Mapping) or _XML_MARKER not in root:
            _logger.warning("XML payload contains no <%s> elements", _XML_MARKER)
            return []

        markers: list[RawMarker] = []
        for item in root[_XML_MARKER]:
            # <marker/> without attributes decodes to None
            markers.append(_unescape(item) if isinstance(item, Mapping) else {})
        return markers


class JsonMarkerDecoder:
    """Decode a JSON array of marker objects."""

    def decode(self, text: str) -> list[RawMarker]:
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"Malformed JSON payload: {exc}") from exc

        if not isinstance(document, list):
            raise DecodeError(f"JSON payload is a {type(document).__name__}, expected an array of markers")

        markers: list[RawMarker] = []
        for index, item in enumerate(document):
            if not isinstance(item, dict):
                raise DecodeError(f"JSON marker #{index} is a {type(item).__name__}, expected an object")
            markers.append(_unescape(item))
        return markers


def get_decoder(feed_version: FeedVersion) -> MarkerDecoder:
    if feed_version is FeedVersion.XML:
        return XmlMarkerDecoder()
    return JsonMarkerDecoder()

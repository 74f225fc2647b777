"""InfluxDB line protocol encoding.

See https://docs.influxdata.com/influxdb/v1/write_protocols/line_protocol_reference/
"""

from __future__ import annotations

import math

from swu2influx.models.point import InfluxPoint, Scalar


def _escape_measurement(value: str) -> str:
    return value.replace("\\", "\\\\").replace(",", "\\,").replace(" ", "\\ ")


def _escape_key(value: str) -> str:
    """Tag keys, tag values and field keys.

    Line breaks would end the line early; they become spaces.
    """
    flattened = value.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return _escape_measurement(flattened).replace("=", "\\=")


def _tag_value(value: Scalar) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return _escape_key(str(value))


def _field_value(key: str, value: Scalar) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value}i"
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"field {key!r} is not a finite number: {value}")
        return repr(value)
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def encode_point(point: InfluxPoint) -> str:
    """Encode *point* as a single line without timestamp.

    Raises :class:`ValueError` for points InfluxDB would reject: no
    fields, non-finite floats or empty tag values.
    """
    if not point.fields:
        raise ValueError("point has no fields")

    parts = [_escape_measurement(point.measurement)]
    for key in sorted(point.tags):
        value = _tag_value(point.tags[key])
        if not value:
            raise ValueError(f"tag {key!r} is empty")
        parts.append(f"{_escape_key(key)}={value}")

    fields = ",".join(f"{_escape_key(key)}={_field_value(key, value)}" for key, value in point.fields.items())
    return f"{','.join(parts)} {fields}"

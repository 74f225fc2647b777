"""Time-series point handed to the sink."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

Scalar = bool | int | float | str


class InfluxPoint(BaseModel):
    """One point: measurement name, indexed tags and measured fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    measurement: str = Field(min_length=1)
    tags: dict[str, Scalar] = Field(default_factory=dict)
    fields: dict[str, Scalar] = Field(default_factory=dict)

"""Pydantic models describing the two wire shapes of a raw element.

``NativeElement`` follows the Overpass JSON element layout; ``InterchangeElement``
follows a GeoJSON ``Feature`` as produced by osmtogeojson.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any, ClassVar, Final, Literal, Self, cast

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from osmsync.domain.model import ElementCategory, Position, WireFormat

from .categories import normalize_category

GeometryType = Literal[
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
]

# Nesting levels between ``coordinates`` and a single position.
_POSITION_DEPTH: Final[dict[str, int]] = {
    "Point": 0,
    "MultiPoint": 1,
    "LineString": 1,
    "MultiLineString": 2,
    "Polygon": 2,
    "MultiPolygon": 3,
}

_DATETIME_ADAPTER: Final[TypeAdapter[datetime]] = TypeAdapter(datetime)


def tag_value(value: object) -> str:
    """Render a property value as a tag string: strings verbatim, the rest as JSON."""

    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True)


def parse_timestamp(value: object) -> datetime | None:
    """Parse an element timestamp, or ``None`` when it is absent or unparsable."""

    if value is None or value == "":
        return None
    try:
        return _DATETIME_ADAPTER.validate_python(value)
    except ValidationError:
        return None


def _position(value: object) -> Position:
    if not isinstance(value, list | tuple):
        raise ValueError(f"Position must be an array, got {type(value).__name__}")
    items = cast(list[object] | tuple[object, ...], value)
    if len(items) < 2:
        raise ValueError("Position needs at least two numbers")
    lon, lat = items[0], items[1]
    if isinstance(lon, bool) or isinstance(lat, bool):
        raise ValueError("Position values must be numbers")
    if not isinstance(lon, int | float) or not isinstance(lat, int | float):
        raise ValueError("Position values must be numbers")
    return (float(lon), float(lat))


def _flatten_positions(coordinates: object, depth: int) -> list[Position]:
    if depth == 0:
        return [_position(coordinates)]
    if not isinstance(coordinates, list | tuple):
        raise ValueError("Coordinates are nested less deeply than the geometry type requires")
    children = cast(list[object] | tuple[object, ...], coordinates)
    return [position for child in children for position in _flatten_positions(child, depth - 1)]


class WireBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    WIRE_FORMAT: ClassVar[WireFormat]


class GeometryPayload(WireBaseModel):
    type: GeometryType
    coordinates: list[Any]

    @model_validator(mode="after")
    def _check_nesting(self) -> Self:
        _ = self.positions
        return self

    @property
    def positions(self) -> list[Position]:
        """Every position of the geometry in document order, rings and parts concatenated."""
        return _flatten_positions(self.coordinates, _POSITION_DEPTH[self.type])


class NodeRefPayload(WireBaseModel):
    id: int
    lat: float | None = None
    lon: float | None = None

    @model_validator(mode="before")
    @classmethod
    def _expand_bare_id(cls, value: object) -> object:
        if isinstance(value, int | str) and not isinstance(value, bool):
            return {"id": value}
        return value


class RelationMemberPayload(WireBaseModel):
    category: ElementCategory = Field(alias="type")
    ref: int
    role: str = ""

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_type(cls, value: object) -> ElementCategory:
        category = normalize_category(value)
        if category is ElementCategory.UNRECOGNIZED:
            raise ValueError(f"Invalid member type: {value!r}")
        return category


class NativeElement(WireBaseModel):
    """Overpass-style element: member references plus a tag map."""

    WIRE_FORMAT: ClassVar[WireFormat] = WireFormat.NATIVE

    id: int | str | None = None
    type: str | None = None
    nodes: list[NodeRefPayload] = Field(default_factory=list[NodeRefPayload])
    members: list[RelationMemberPayload] = Field(default_factory=list[RelationMemberPayload])
    tags: dict[str, str]
    timestamp: datetime | None = None
    lat: float | None = None
    lon: float | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value: object) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _stringify_tags(cls, value: object) -> object:
        if isinstance(value, Mapping):
            mapping_value = cast(Mapping[object, object], value)
            return {str(k): tag_value(v) for k, v in mapping_value.items() if v is not None}
        return value


class InterchangeElement(WireBaseModel):
    """GeoJSON feature: embedded geometry plus a flat property map."""

    WIRE_FORMAT: ClassVar[WireFormat] = WireFormat.INTERCHANGE

    type: Literal["Feature"] = "Feature"
    id: int | str | None = None
    geometry: GeometryPayload | None = None
    properties: dict[str, Any] = Field(default_factory=dict[str, Any])

    @field_validator("properties", mode="before")
    @classmethod
    def _null_properties(cls, value: object) -> object:
        return {} if value is None else value

    @property
    def timestamp(self) -> datetime | None:
        return parse_timestamp(self.properties.get("timestamp"))


type ParsedElement = NativeElement | InterchangeElement

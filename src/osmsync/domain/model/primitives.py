"""Domain primitives: scalar aliases + small value objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from osmsync.domain.model.enums import ElementCategory

type OsmId = int
type Tags = dict[str, str]
type Position = tuple[float, float]
"""A ``(lon, lat)`` pair in GeoJSON axis order."""


@dataclass(frozen=True, slots=True)
class ElementIdentity:
    """External identity of an element: category plus OSM id."""

    category: ElementCategory
    osm_id: OsmId

    def __str__(self) -> str:
        return f"{self.category}/{self.osm_id}"


@dataclass(frozen=True, slots=True)
class Member:
    """Reference from a relation to another element of any category."""

    category: ElementCategory
    osm_id: OsmId
    role: str = ""


@dataclass(frozen=True, slots=True)
class PointSpec:
    """Point to look up or create; matched by OSM id when present, else by position."""

    osm_id: OsmId | None = None
    lon: float | None = None
    lat: float | None = None

    @property
    def position(self) -> Position | None:
        if self.lon is None or self.lat is None:
            return None
        return (self.lon, self.lat)

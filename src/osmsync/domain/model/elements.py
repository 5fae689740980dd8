"""OSM element entities.

Nodes are owned independently and shared by reference. Ways and relations keep an
ordered list of node ids; that order is the geometry's topology.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Self

from osmsync.domain.model.entity import Entity
from osmsync.domain.model.enums import ElementCategory
from osmsync.domain.model.primitives import ElementIdentity

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from osmsync.domain.model.primitives import Member, OsmId, Position, Tags


@dataclass(kw_only=True)
class ElementData:
    """Attributes of an element about to be created, independent of its category."""

    osm_id: OsmId | None = None
    tags: Tags = field(default_factory=dict[str, str])
    updated_at: datetime | None = None
    geojson: dict[str, Any] | None = None
    lon: float | None = None
    lat: float | None = None
    node_refs: list[UUID] = field(default_factory=list["UUID"])
    members: list[Member] = field(default_factory=list["Member"])


@dataclass(eq=False, kw_only=True)
class Element(Entity):
    # class-level discriminator; subclasses must override
    CATEGORY: ClassVar[ElementCategory]

    osm_id: OsmId | None = None
    osm_type: ElementCategory = field(init=False)
    tags: Tags = field(default_factory=dict[str, str])
    updated_at: datetime | None = None
    geojson: dict[str, Any] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.osm_type = self.CATEGORY

    @property
    def category(self) -> ElementCategory:
        return self.CATEGORY

    @property
    def identity(self) -> ElementIdentity | None:
        if self.osm_id is None:
            return None
        return ElementIdentity(self.CATEGORY, self.osm_id)

    @classmethod
    def from_data(cls, data: ElementData) -> Self:
        return cls(
            osm_id=data.osm_id,
            tags=dict(data.tags),
            updated_at=data.updated_at,
            geojson=data.geojson,
        )


@dataclass(eq=False, kw_only=True)
class Node(Element):
    CATEGORY: ClassVar[ElementCategory] = ElementCategory.NODE

    lon: float | None = None
    lat: float | None = None

    @property
    def position(self) -> Position | None:
        if self.lon is None or self.lat is None:
            return None
        return (self.lon, self.lat)

    @classmethod
    def from_data(cls, data: ElementData) -> Self:
        node = super().from_data(data)
        node.lon = data.lon
        node.lat = data.lat
        return node


@dataclass(eq=False, kw_only=True)
class CompositeElement(Element):
    """Element whose geometry is an ordered sequence of node references."""

    node_refs: list[UUID] = field(default_factory=list["UUID"])

    @property
    def is_closed(self) -> bool:
        return len(self.node_refs) > 3 and self.node_refs[0] == self.node_refs[-1]

    @classmethod
    def from_data(cls, data: ElementData) -> Self:
        element = super().from_data(data)
        element.node_refs = list(data.node_refs)
        return element


@dataclass(eq=False, kw_only=True)
class Way(CompositeElement):
    CATEGORY: ClassVar[ElementCategory] = ElementCategory.WAY


@dataclass(eq=False, kw_only=True)
class Relation(CompositeElement):
    CATEGORY: ClassVar[ElementCategory] = ElementCategory.RELATION

    members: list[Member] = field(default_factory=list["Member"])

    @classmethod
    def from_data(cls, data: ElementData) -> Self:
        relation = super().from_data(data)
        relation.members = list(data.members)
        return relation

"""Lookup-or-create of the point entities referenced by ways and relations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from osmsync.domain.model import ElementCategory, ElementData, Node, PointSpec

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from osmsync.domain.model import Position
    from osmsync.domain.ports import ElementStore

    from .schema import GeometryPayload, NodeRefPayload


@dataclass(slots=True)
class PointMaterializer:
    """Resolve point references to stored nodes, preserving input order.

    Native member refs match by OSM id. Interchange positions carry no OSM id and
    match by exact position instead, unless ``match_by_position`` is off.
    """

    store: ElementStore
    match_by_position: bool = True

    def from_refs(self, refs: Sequence[NodeRefPayload]) -> list[UUID]:
        specs = [PointSpec(osm_id=ref.id, lon=ref.lon, lat=ref.lat) for ref in refs]
        return [node.id for node in self.store.find_or_create_points(specs)]

    def from_geometry(self, geometry: GeometryPayload | None) -> list[UUID]:
        if geometry is None:
            return []
        return self.from_positions(geometry.positions)

    def from_positions(self, positions: Sequence[Position]) -> list[UUID]:
        refs: list[UUID] = []
        # closed rings repeat their first position; both ends must share one node
        resolved: dict[Position, UUID] = {}
        for position in positions:
            node_id = resolved.get(position)
            if node_id is None:
                node_id = self._find_or_create(position).id
                resolved[position] = node_id
            refs.append(node_id)
        return refs

    def _find_or_create(self, position: Position) -> Node:
        if self.match_by_position:
            existing = self.store.find_point_by_position(position)
            if existing is not None:
                return existing
        lon, lat = position
        created = self.store.create(ElementCategory.NODE, ElementData(lon=lon, lat=lat))
        return cast(Node, created)

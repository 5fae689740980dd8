"""Conversion between raw wire elements and persisted entities."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from osmsync.domain.model import (
    CompositeElement,
    ElementCategory,
    ElementData,
    Member,
    Node,
)

from .classify import parse_element
from .errors import ElementFormatError
from .schema import InterchangeElement, NativeElement, tag_value

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from uuid import UUID

    from osmsync.domain.model import Element, OsmId, Tags
    from osmsync.domain.ports import ElementStore

    from .points import PointMaterializer

log = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def properties_to_tags(properties: Mapping[str, object]) -> Tags:
    """Flatten a GeoJSON property map into string tags.

    A nested ``tags`` mapping (osmtogeojson's default layout) is merged into the
    top level. ``None`` values are dropped and ``osm_type`` is lowercased.
    """

    tags: Tags = {}
    for key, value in properties.items():
        if value is None:
            continue
        if key == "tags" and isinstance(value, Mapping):
            nested = cast(Mapping[object, object], value)
            tags.update({str(k): tag_value(v) for k, v in nested.items() if v is not None})
        elif key == "osm_type" and isinstance(value, str):
            tags[key] = value.lower()
        else:
            tags[key] = tag_value(value)
    return tags


def _interchange_cache(raw: Mapping[str, Any]) -> dict[str, Any]:
    cache = copy.deepcopy(dict(raw))
    properties = cache.get("properties")
    if isinstance(properties, dict):
        osm_type = cast(dict[str, Any], properties).get("osm_type")
        if isinstance(osm_type, str):
            properties["osm_type"] = osm_type.lower()
    return cache


@dataclass(slots=True)
class ElementConverter:
    """Maps raw elements to element data and stored elements back to GeoJSON features."""

    store: ElementStore
    points: PointMaterializer
    clock: Callable[[], datetime] = field(default=utcnow)

    def to_entity(
        self,
        category: ElementCategory,
        raw: object,
        *,
        osm_id: OsmId | None = None,
    ) -> ElementData:
        """Build the data for a new element of ``category`` from a raw element."""

        element = parse_element(raw)
        match element:
            case NativeElement():
                return self._from_native(category, element, osm_id)
            case InterchangeElement():
                raw_mapping = cast(Mapping[str, Any], raw)
                return self._from_interchange(category, element, raw_mapping, osm_id)

    def apply_interchange(self, entity: Element, raw: object) -> None:
        """Overwrite tags, geometry, timestamp and cache of ``entity`` in place."""

        element = parse_element(raw)
        if not isinstance(element, InterchangeElement):
            raise ElementFormatError("Only GeoJSON features update stored elements")

        entity.tags = properties_to_tags(element.properties)
        entity.updated_at = _as_utc(element.timestamp) or self.clock()
        entity.geojson = _interchange_cache(cast(Mapping[str, Any], raw))
        if isinstance(entity, Node):
            if element.geometry is not None and element.geometry.positions:
                entity.lon, entity.lat = element.geometry.positions[0]
        elif isinstance(entity, CompositeElement):
            entity.node_refs = self.points.from_geometry(element.geometry)

    def to_interchange(self, entity: Element) -> dict[str, Any]:
        feature: dict[str, Any] = {"type": "Feature"}
        identity = entity.identity
        if identity is not None:
            feature["id"] = str(identity)
        feature["properties"] = dict(entity.tags)
        feature["geometry"] = self._geometry(entity)
        return feature

    def to_feature_collection(self, entities: Iterable[Element]) -> dict[str, Any]:
        return {
            "type": "FeatureCollection",
            "features": [self.to_interchange(entity) for entity in entities],
        }

    def _from_native(
        self,
        category: ElementCategory,
        element: NativeElement,
        osm_id: OsmId | None,
    ) -> ElementData:
        data = ElementData(
            osm_id=osm_id,
            tags=dict(element.tags),
            updated_at=_as_utc(element.timestamp) or self.clock(),
        )
        if category is ElementCategory.NODE:
            data.lon = element.lon
            data.lat = element.lat
            return data
        data.node_refs = self.points.from_refs(element.nodes)
        if category is ElementCategory.RELATION:
            data.members = [
                Member(category=member.category, osm_id=member.ref, role=member.role)
                for member in element.members
            ]
        return data

    def _from_interchange(
        self,
        category: ElementCategory,
        element: InterchangeElement,
        raw: Mapping[str, Any],
        osm_id: OsmId | None,
    ) -> ElementData:
        data = ElementData(
            osm_id=osm_id,
            tags=properties_to_tags(element.properties),
            updated_at=_as_utc(element.timestamp) or self.clock(),
            geojson=_interchange_cache(raw),
        )
        if category is ElementCategory.NODE:
            if element.geometry is not None and element.geometry.positions:
                data.lon, data.lat = element.geometry.positions[0]
            return data
        data.node_refs = self.points.from_geometry(element.geometry)
        return data

    def _geometry(self, entity: Element) -> dict[str, Any] | None:
        if isinstance(entity, Node):
            position = entity.position
            if position is None:
                return None
            return {"type": "Point", "coordinates": list(position)}
        if not isinstance(entity, CompositeElement):
            return None
        coordinates = self._coordinates(entity.node_refs)
        if entity.is_closed and len(coordinates) == len(entity.node_refs):
            return {"type": "Polygon", "coordinates": [coordinates]}
        return {"type": "LineString", "coordinates": coordinates}

    def _coordinates(self, refs: Sequence[UUID]) -> list[list[float]]:
        if not refs:
            return []
        nodes_by_id = {node.id: node for node in self.store.get_points(refs)}
        coordinates: list[list[float]] = []
        for ref in refs:
            node = nodes_by_id.get(ref)
            if node is None or node.position is None:
                log.debug("Skipping unresolvable node reference %s", ref)
                continue
            coordinates.append(list(node.position))
        return coordinates

"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from sqlalchemy import select

from osmsync.adapters.sqlalchemy.mappings import CLASS_BY_CATEGORY, TABLE_BY_CATEGORY, node_table
from osmsync.domain.model import Node

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from uuid import UUID

    from sqlalchemy import Table
    from sqlalchemy.orm import Session

    from osmsync.domain.model import (
        Element,
        ElementCategory,
        ElementData,
        OsmId,
        PointSpec,
        Position,
    )

log = logging.getLogger(__name__)


class UnknownCategoryError(LookupError):
    """Raised when no class/table is configured for an element category."""


class SqlAlchemyElementStore:
    """Element store over one session.

    ``classes`` and ``tables`` map each category to its mapped class and table; they
    default to the module-level mappings and can be narrowed by configuration.
    """

    def __init__(
        self,
        session: Session,
        *,
        classes: Mapping[ElementCategory, type[Element]] | None = None,
        tables: Mapping[ElementCategory, Table] | None = None,
    ) -> None:
        self.session = session
        self._classes = dict(classes or CLASS_BY_CATEGORY)
        self._tables = dict(tables or TABLE_BY_CATEGORY)

    def create(self, category: ElementCategory, data: ElementData) -> Element:
        element = self._class_for(category).from_data(data)
        self.session.add(element)
        self.session.flush()
        return element

    def find_one(self, category: ElementCategory, osm_id: OsmId) -> Element | None:
        element_cls = self._class_for(category)
        table = self._tables[category]
        stmt = (
            select(element_cls)
            .where(table.c.osm_type == category)
            .where(table.c.osm_id == osm_id)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_or_create_points(self, points: Sequence[PointSpec]) -> list[Node]:
        known_ids = {point.osm_id for point in points if point.osm_id is not None}
        by_osm_id: dict[OsmId, Node] = {}
        if known_ids:
            stmt = select(Node).where(node_table.c.osm_id.in_(known_ids))
            by_osm_id = {
                node.osm_id: node
                for node in self.session.execute(stmt).scalars()
                if node.osm_id is not None
            }

        nodes: list[Node] = []
        created = 0
        for point in points:
            node = by_osm_id.get(point.osm_id) if point.osm_id is not None else None
            if node is None and point.osm_id is None and point.position is not None:
                node = self.find_point_by_position(point.position)
            if node is None:
                node = Node(osm_id=point.osm_id, lon=point.lon, lat=point.lat)
                self.session.add(node)
                created += 1
                if point.osm_id is not None:
                    by_osm_id[point.osm_id] = node
            nodes.append(node)

        if created:
            self.session.flush()
            log.debug("Created %s of %s referenced nodes", created, len(points))
        return nodes

    def find_point_by_position(self, position: Position) -> Node | None:
        lon, lat = position
        stmt = (
            select(Node)
            .where(node_table.c.lon == lon)
            .where(node_table.c.lat == lat)
            .order_by(node_table.c.osm_id.is_(None))
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def get_points(self, refs: Iterable[UUID]) -> list[Node]:
        ids = list(dict.fromkeys(refs))
        if not ids:
            return []
        stmt = select(Node).where(node_table.c.id.in_(ids))
        return list(self.session.execute(stmt).scalars())

    def save(self, element: Element) -> None:
        self.session.add(element)
        self.session.flush()

    def _class_for(self, category: ElementCategory) -> type[Element]:
        try:
            return self._classes[category]
        except KeyError:
            raise UnknownCategoryError(f"No element class configured for {category}") from None


if TYPE_CHECKING:
    from osmsync.domain.ports import ElementStore

    _session_stub = cast("Session", object())
    _store_check: ElementStore = SqlAlchemyElementStore(_session_stub)

"""Ports for persisting OSM elements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from osmsync.domain.model import (
        Element,
        ElementCategory,
        ElementData,
        Node,
        OsmId,
        PointSpec,
        Position,
    )


@runtime_checkable
class ElementStore(Protocol):
    """Persistence contract the reconciler relies on.

    Implementations own the category -> class/table mapping. None of the methods
    retry; store failures propagate to the caller.
    """

    def create(self, category: ElementCategory, data: ElementData) -> Element: ...

    def find_one(self, category: ElementCategory, osm_id: OsmId) -> Element | None: ...

    def find_or_create_points(self, points: Sequence[PointSpec]) -> list[Node]:
        """Return one node per spec, in input order, creating those not yet stored."""
        ...

    def find_point_by_position(self, position: Position) -> Node | None: ...

    def get_points(self, refs: Iterable[UUID]) -> list[Node]:
        """Bulk lookup by internal id. Result order is unspecified."""
        ...

    def save(self, element: Element) -> None: ...

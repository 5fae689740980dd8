"""Public domain model surface."""

from __future__ import annotations

from osmsync.domain.model.elements import (
    CompositeElement,
    Element,
    ElementData,
    Node,
    Relation,
    Way,
)
from osmsync.domain.model.entity import Entity
from osmsync.domain.model.enums import ElementCategory, WireFormat
from osmsync.domain.model.primitives import (
    ElementIdentity,
    Member,
    OsmId,
    PointSpec,
    Position,
    Tags,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    # elements
    "Element",
    "ElementData",
    "CompositeElement",
    "Node",
    "Way",
    "Relation",
    # enums
    "ElementCategory",
    "WireFormat",
    # primitives
    "ElementIdentity",
    "Member",
    "OsmId",
    "PointSpec",
    "Position",
    "Tags",
]

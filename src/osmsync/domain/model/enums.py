"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ElementCategory(StrEnum):
    """Persisted entity category of an OSM element."""

    NODE = "node"
    WAY = "way"
    RELATION = "relation"

    # Sentinel for type tokens that do not name a known category.
    UNRECOGNIZED = "unrecognized"


class WireFormat(StrEnum):
    """Wire shape of a raw element."""

    NATIVE = "native"
    INTERCHANGE = "interchange"
    UNKNOWN = "unknown"

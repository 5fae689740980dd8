"""SQLAlchemy mapping metadata for the osmsync domain model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import Any, Final, cast

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    Index,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from osmsync.domain.model import Element, ElementCategory, Member, Node, Relation, Way

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class UuidListType(TypeDecorator[list[uuid.UUID]]):
    """Ordered list of UUIDs stored as a JSON array."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: list[uuid.UUID] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps([str(item) for item in value])

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[uuid.UUID]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        return [uuid.UUID(item) for item in cast(list[Any], loaded) if isinstance(item, str)]


class MemberListType(TypeDecorator[list[Member]]):
    """Relation members stored as a JSON array of ``{type, ref, role}`` objects."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: list[Member] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        payload = [
            {"type": str(member.category), "ref": member.osm_id, "role": member.role}
            for member in value
        ]
        return json.dumps(payload)

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[Member]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        members: list[Member] = []
        for item in cast(list[Any], loaded):
            if isinstance(item, dict):
                entry = cast(dict[str, Any], item)
                members.append(
                    Member(
                        category=ElementCategory(entry["type"]),
                        osm_id=int(entry["ref"]),
                        role=str(entry.get("role", "")),
                    )
                )
        return members


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _category_column() -> Column[ElementCategory]:
    return Column("osm_type", Enum(ElementCategory, native_enum=False), nullable=False)


# Core tables -----------------------------------------------------------------

node_table = Table(
    "node",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    _category_column(),
    Column("osm_id", BigInteger, nullable=True),
    Column("lon", Float, nullable=True),
    Column("lat", Float, nullable=True),
    Column("tags", JSON, nullable=False, default=dict),
    Column("updated_at", UTCDateTime(), nullable=True),
    Column("geojson", JSON, nullable=True),
    UniqueConstraint("osm_type", "osm_id", name="uq_node_identity"),
    Index("ix_node_position", "lon", "lat"),
)

way_table = Table(
    "way",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    _category_column(),
    Column("osm_id", BigInteger, nullable=True),
    Column("node_refs", UuidListType(), nullable=False, default=list),
    Column("tags", JSON, nullable=False, default=dict),
    Column("updated_at", UTCDateTime(), nullable=True),
    Column("geojson", JSON, nullable=True),
    UniqueConstraint("osm_type", "osm_id", name="uq_way_identity"),
)

relation_table = Table(
    "relation",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    _category_column(),
    Column("osm_id", BigInteger, nullable=True),
    Column("node_refs", UuidListType(), nullable=False, default=list),
    Column("members", MemberListType(), nullable=False, default=list),
    Column("tags", JSON, nullable=False, default=dict),
    Column("updated_at", UTCDateTime(), nullable=True),
    Column("geojson", JSON, nullable=True),
    UniqueConstraint("osm_type", "osm_id", name="uq_relation_identity"),
)

CLASS_BY_CATEGORY: Final[dict[ElementCategory, type[Element]]] = {
    ElementCategory.NODE: Node,
    ElementCategory.WAY: Way,
    ElementCategory.RELATION: Relation,
}

TABLE_BY_CATEGORY: Final[dict[ElementCategory, Table]] = {
    ElementCategory.NODE: node_table,
    ElementCategory.WAY: way_table,
    ElementCategory.RELATION: relation_table,
}


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    for category, element_cls in CLASS_BY_CATEGORY.items():
        mapper_registry.map_imperatively(element_cls, TABLE_BY_CATEGORY[category])

    configure_mappers()
    return mapper_registry

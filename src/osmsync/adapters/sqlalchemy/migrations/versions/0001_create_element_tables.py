"""create element tables

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_CATEGORY = sa.Enum(
    "NODE",
    "WAY",
    "RELATION",
    "UNRECOGNIZED",
    name="elementcategory",
    native_enum=False,
)


def upgrade() -> None:
    op.create_table(
        "node",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("osm_type", _CATEGORY, nullable=False),
        sa.Column("osm_id", sa.BigInteger(), nullable=True),
        sa.Column("lon", sa.Float(), nullable=True),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("geojson", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_node"),
        sa.UniqueConstraint("osm_type", "osm_id", name="uq_node_identity"),
    )
    op.create_index("ix_node_position", "node", ["lon", "lat"])

    op.create_table(
        "way",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("osm_type", _CATEGORY, nullable=False),
        sa.Column("osm_id", sa.BigInteger(), nullable=True),
        sa.Column("node_refs", sa.Text(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("geojson", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_way"),
        sa.UniqueConstraint("osm_type", "osm_id", name="uq_way_identity"),
    )

    op.create_table(
        "relation",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("osm_type", _CATEGORY, nullable=False),
        sa.Column("osm_id", sa.BigInteger(), nullable=True),
        sa.Column("node_refs", sa.Text(), nullable=False),
        sa.Column("members", sa.Text(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("geojson", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_relation"),
        sa.UniqueConstraint("osm_type", "osm_id", name="uq_relation_identity"),
    )


def downgrade() -> None:
    op.drop_table("relation")
    op.drop_table("way")
    op.drop_index("ix_node_position", table_name="node")
    op.drop_table("node")

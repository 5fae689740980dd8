from __future__ import annotations

from osmsync.domain.ingest import InterchangeElement, PointMaterializer, parse_element
from osmsync.domain.ingest.schema import GeometryPayload, NodeRefPayload
from tests.helpers.elements import FakeElementStore, closed_ring, make_feature


def _refs(*values: object) -> list[NodeRefPayload]:
    return [NodeRefPayload.model_validate(value) for value in values]


def test_from_refs_preserves_order_and_duplicates(fake_store: FakeElementStore) -> None:
    points = PointMaterializer(fake_store)

    refs = points.from_refs(_refs(1, 2, 1))

    assert len(refs) == 3
    assert refs[0] == refs[2]
    assert refs[0] != refs[1]
    assert [node.osm_id for node in fake_store.nodes] == [1, 2]


def test_from_refs_is_idempotent(fake_store: FakeElementStore) -> None:
    points = PointMaterializer(fake_store)

    first = points.from_refs(_refs(10, 11))
    second = points.from_refs(_refs(11, 10))

    assert second == [first[1], first[0]]
    assert len(fake_store.nodes) == 2


def test_from_refs_keeps_inline_positions(fake_store: FakeElementStore) -> None:
    points = PointMaterializer(fake_store)

    points.from_refs(_refs({"id": 3, "lat": 52.5, "lon": 13.4}))

    assert fake_store.nodes[0].position == (13.4, 52.5)


def test_from_geometry_reuses_node_for_closed_ring(fake_store: FakeElementStore) -> None:
    points = PointMaterializer(fake_store)
    geometry = GeometryPayload(type="Polygon", coordinates=[closed_ring()])

    refs = points.from_geometry(geometry)

    assert len(refs) == 5
    assert refs[0] == refs[-1]
    assert len(fake_store.nodes) == 4
    assert all(node.osm_id is None for node in fake_store.nodes)


def test_from_geometry_flattens_multipolygon_in_order(fake_store: FakeElementStore) -> None:
    points = PointMaterializer(fake_store)
    coordinates = [[[[0, 0], [1, 0], [1, 1]]], [[[5, 5], [6, 5]]]]
    parsed = parse_element(make_feature(geometry_type="MultiPolygon", coordinates=coordinates))
    assert isinstance(parsed, InterchangeElement)

    refs = points.from_geometry(parsed.geometry)

    positions = {node.id: node.position for node in fake_store.nodes}
    assert [positions[ref] for ref in refs] == [
        (0.0, 0.0),
        (1.0, 0.0),
        (1.0, 1.0),
        (5.0, 5.0),
        (6.0, 5.0),
    ]


def test_from_geometry_matches_existing_points_by_position(fake_store: FakeElementStore) -> None:
    points = PointMaterializer(fake_store)

    first = points.from_positions([(13.0, 52.0), (13.1, 52.1)])
    second = points.from_positions([(13.1, 52.1), (13.2, 52.2)])

    assert second[0] == first[1]
    assert len(fake_store.nodes) == 3


def test_position_matching_can_be_disabled(fake_store: FakeElementStore) -> None:
    points = PointMaterializer(fake_store, match_by_position=False)

    first = points.from_positions([(13.0, 52.0)])
    second = points.from_positions([(13.0, 52.0), (13.0, 52.0)])

    assert first[0] != second[0]
    assert second[0] == second[1]
    assert "find_point_by_position" not in fake_store.calls


def test_from_geometry_without_geometry(fake_store: FakeElementStore) -> None:
    assert PointMaterializer(fake_store).from_geometry(None) == []
    assert fake_store.calls == []

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from osmsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyElementUnitOfWork, shutdown
from osmsync.app import export_element, export_elements, ingest_document, ingest_elements
from osmsync.config import ReconcileConfig
from osmsync.domain.ingest import BatchInputError
from osmsync.domain.model import ElementCategory, Way
from tests.helpers.elements import closed_ring, make_feature, make_native_way

if TYPE_CHECKING:
    from collections.abc import Callable


def test_ingest_document_then_export(
    sqlite_unit_of_work: Callable[[], SqlAlchemyElementUnitOfWork],
) -> None:
    document = {
        "type": "FeatureCollection",
        "features": [
            make_feature("way/100", properties={"highway": "primary"}),
            make_feature("way/101", [closed_ring()], geometry_type="Polygon", properties={}),
        ],
    }

    report = ingest_document(document, unit_of_work_factory=sqlite_unit_of_work)
    feature = export_element(ElementCategory.WAY, 100, unit_of_work_factory=sqlite_unit_of_work)
    polygon = export_element(ElementCategory.WAY, 101, unit_of_work_factory=sqlite_unit_of_work)

    assert report.created == 2
    assert feature == {
        "type": "Feature",
        "id": "way/100",
        "properties": {"highway": "primary"},
        "geometry": {
            "type": "LineString",
            "coordinates": [[13.0, 52.0], [13.1, 52.1], [13.2, 52.2]],
        },
    }
    assert polygon is not None
    assert polygon["geometry"]["type"] == "Polygon"


def test_reingest_updates_committed_elements(
    sqlite_unit_of_work: Callable[[], SqlAlchemyElementUnitOfWork],
) -> None:
    ingest_elements([make_native_way(osm_id=7)], unit_of_work_factory=sqlite_unit_of_work)

    report = ingest_elements(
        [make_native_way(osm_id=7), make_feature("way/7", properties={"name": "Updated"})],
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert report.unchanged == 1
    assert report.updated == 1
    with sqlite_unit_of_work() as uow:
        way = uow.repositories.elements.find_one(ElementCategory.WAY, 7)
        assert way is not None
        assert way.tags == {"name": "Updated"}
        assert way.geojson is not None


def test_ingest_without_position_matching_creates_fresh_points(
    sqlite_unit_of_work: Callable[[], SqlAlchemyElementUnitOfWork],
) -> None:
    config = ReconcileConfig(match_points_by_position=False)

    ingest_elements(
        [make_feature("way/1"), make_feature("way/2")],
        unit_of_work_factory=sqlite_unit_of_work,
        config=config,
    )

    with sqlite_unit_of_work() as uow:
        first = uow.repositories.elements.find_one(ElementCategory.WAY, 1)
        second = uow.repositories.elements.find_one(ElementCategory.WAY, 2)
        assert isinstance(first, Way)
        assert isinstance(second, Way)
        assert set(first.node_refs).isdisjoint(second.node_refs)


def test_export_elements_returns_feature_collection(
    sqlite_unit_of_work: Callable[[], SqlAlchemyElementUnitOfWork],
) -> None:
    ingest_elements(
        [make_native_way(osm_id=1), make_native_way(osm_id=2)],
        unit_of_work_factory=sqlite_unit_of_work,
    )

    collection = export_elements(
        ElementCategory.WAY, [2, 404, 1], unit_of_work_factory=sqlite_unit_of_work
    )

    assert collection["type"] == "FeatureCollection"
    assert [feature["id"] for feature in collection["features"]] == ["way/2", "way/1"]


def test_export_unknown_element(
    sqlite_unit_of_work: Callable[[], SqlAlchemyElementUnitOfWork],
) -> None:
    assert export_element(ElementCategory.NODE, 1, unit_of_work_factory=sqlite_unit_of_work) is None


def test_ingest_rejects_non_sequence_documents(
    sqlite_unit_of_work: Callable[[], SqlAlchemyElementUnitOfWork],
) -> None:
    with pytest.raises(BatchInputError):
        ingest_document("not a document", unit_of_work_factory=sqlite_unit_of_work)


def test_ingest_starts_default_adapter(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    shutdown()
    try:
        report = ingest_elements([make_native_way(osm_id=3)])
        feature = export_element(ElementCategory.WAY, 3)
    finally:
        shutdown()

    assert report.created == 1
    assert feature is not None
    assert feature["id"] == "way/3"

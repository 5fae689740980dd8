from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from osmsync.domain.ingest import ReconcileReport
from osmsync.domain.model import ElementCategory
from osmsync.ui import cli
from tests.helpers.elements import make_feature

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def document_path(tmp_path: Path) -> Path:
    path = tmp_path / "features.geojson"
    path.write_text(json.dumps({"type": "FeatureCollection", "features": [make_feature()]}))
    return path


def test_ingest_command(monkeypatch: pytest.MonkeyPatch, document_path: Path) -> None:
    captured: dict[str, Any] = {}

    def fake_ingest(document: object, **kwargs: object) -> ReconcileReport:
        captured["document"] = document
        captured.update(kwargs)
        return ReconcileReport()

    monkeypatch.setattr(cli, "ingest_document", fake_ingest)

    cli.main(["ingest", str(document_path), "--type", "W"])

    assert captured["document"]["type"] == "FeatureCollection"
    assert captured["category"] is ElementCategory.WAY


def test_ingest_command_without_type(
    monkeypatch: pytest.MonkeyPatch, document_path: Path
) -> None:
    captured: dict[str, Any] = {}

    def fake_ingest(document: object, **kwargs: object) -> ReconcileReport:
        captured.update(kwargs)
        return ReconcileReport()

    monkeypatch.setattr(cli, "ingest_document", fake_ingest)

    cli.main(["ingest", str(document_path)])

    assert captured["category"] is None


def test_invalid_type_exits_with_usage_error(document_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["ingest", str(document_path), "--type", "area"])

    assert excinfo.value.code == 2


def test_invalid_json_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["ingest", str(path)])

    assert excinfo.value.code == 1


def test_export_command_prints_feature(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feature = {"type": "Feature", "id": "node/1", "properties": {}, "geometry": None}

    def fake_export(category: ElementCategory, osm_id: int) -> dict[str, Any]:
        assert category is ElementCategory.NODE
        assert osm_id == 1
        return feature

    monkeypatch.setattr(cli, "export_element", fake_export)

    cli.main(["export", "n", "1"])

    assert json.loads(capsys.readouterr().out) == feature


def test_export_missing_element_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "export_element", lambda category, osm_id: None)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["export", "way", "404"])

    assert excinfo.value.code == 1


def test_export_several_ids_prints_feature_collection(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, Any] = {}

    def fake_export_elements(category: ElementCategory, osm_ids: list[int]) -> dict[str, Any]:
        captured["category"] = category
        captured["osm_ids"] = osm_ids
        return {"type": "FeatureCollection", "features": []}

    monkeypatch.setattr(cli, "export_elements", fake_export_elements)

    cli.main(["export", "w", "1", "2"])

    assert captured == {"category": ElementCategory.WAY, "osm_ids": [1, 2]}
    assert json.loads(capsys.readouterr().out)["type"] == "FeatureCollection"

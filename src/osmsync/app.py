"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING, Any

from osmsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyElementUnitOfWork,
    is_started,
    startup,
)
from osmsync.config import get_reconcile_config
from osmsync.domain.ingest import ElementReconciler, document_elements
from osmsync.domain.ports.unit_of_work import ElementUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Sequence

    from osmsync.config import ReconcileConfig
    from osmsync.domain.ingest import ReconcileReport
    from osmsync.domain.model import Element, ElementCategory, OsmId

UnitOfWorkFactory = Callable[[], ElementUnitOfWork]


log = getLogger(__name__)


def _resolve_unit_of_work(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyElementUnitOfWork


def ingest_elements(
    elements: Sequence[object],
    *,
    category: ElementCategory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconcileConfig | None = None,
) -> ReconcileReport:
    """Reconcile a batch of raw elements and commit the result."""

    effective_uow = _resolve_unit_of_work(unit_of_work_factory)
    effective_config = config or get_reconcile_config()
    log.info("Starting ingest of %s elements", len(elements))

    with effective_uow() as uow:
        reconciler = ElementReconciler(
            uow.repositories.elements,
            match_points_by_position=effective_config.match_points_by_position,
        )
        report = reconciler.reconcile_batch(elements, category=category)
        uow.commit()

    log.info(
        f"Finished ingest: created={report.created}, updated={report.updated}, "
        f"unchanged={report.unchanged}, skipped={len(report.skipped)}"
    )
    return report


def ingest_document(
    document: object,
    *,
    category: ElementCategory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconcileConfig | None = None,
) -> ReconcileReport:
    """Reconcile every element of a FeatureCollection, Overpass response or element list."""

    return ingest_elements(
        document_elements(document),
        category=category,
        unit_of_work_factory=unit_of_work_factory,
        config=config,
    )


def export_element(
    category: ElementCategory,
    osm_id: OsmId,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> dict[str, Any] | None:
    """Return the stored element as a GeoJSON feature, or ``None`` if unknown."""

    effective_uow = _resolve_unit_of_work(unit_of_work_factory)
    with effective_uow() as uow:
        store = uow.repositories.elements
        element = store.find_one(category, osm_id)
        if element is None:
            log.info("No stored element %s/%s", category, osm_id)
            return None
        return ElementReconciler(store).to_interchange(element)


def export_elements(
    category: ElementCategory,
    osm_ids: Sequence[OsmId],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> dict[str, Any]:
    """Return the stored elements as a FeatureCollection; unknown ids are left out."""

    effective_uow = _resolve_unit_of_work(unit_of_work_factory)
    with effective_uow() as uow:
        store = uow.repositories.elements
        found: list[Element] = []
        for osm_id in osm_ids:
            element = store.find_one(category, osm_id)
            if element is None:
                log.info("No stored element %s/%s", category, osm_id)
                continue
            found.append(element)
        return ElementReconciler(store).to_feature_collection(found)

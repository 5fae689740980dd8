"""Reconciliation of raw elements against the element store.

Each element goes through ``extract identity -> look up -> update or create``.
Format, identity and type errors skip only the element at hand; store errors
propagate and abort the batch. Nothing here is transactional: concurrent batches
touching the same OSM ids must be serialized by the caller.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from osmsync.domain.model import ElementCategory, WireFormat

from .categories import require_category
from .classify import classify
from .convert import ElementConverter, utcnow
from .errors import BatchInputError, MissingIdentityError, ReconciliationError
from .identity import extract_identity
from .points import PointMaterializer

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

    from osmsync.domain.model import Element
    from osmsync.domain.ports import ElementStore

log = logging.getLogger(__name__)


class ReconcileState(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class SkippedElement:
    """Diagnostic for an element excluded from a reconciliation result."""

    index: int | None
    kind: str
    message: str


@dataclass(frozen=True, slots=True)
class ReconcileOutcome:
    state: ReconcileState
    element: Element | None = None
    diagnostic: SkippedElement | None = None


@dataclass(slots=True)
class ReconcileReport:
    """Summary of a batch: reconciled elements in input order plus skip diagnostics."""

    elements: list[Element] = field(default_factory=list["Element"])
    counts: Counter[ReconcileState] = field(default_factory=Counter[ReconcileState])
    skipped: list[SkippedElement] = field(default_factory=list[SkippedElement])

    @property
    def created(self) -> int:
        return self.counts[ReconcileState.CREATED]

    @property
    def updated(self) -> int:
        return self.counts[ReconcileState.UPDATED]

    @property
    def unchanged(self) -> int:
        return self.counts[ReconcileState.UNCHANGED]

    def record(self, outcome: ReconcileOutcome) -> None:
        self.counts[outcome.state] += 1
        if outcome.element is not None:
            self.elements.append(outcome.element)
        if outcome.diagnostic is not None:
            self.skipped.append(outcome.diagnostic)


class ElementReconciler:
    """Create-or-update of OSM elements arriving as Overpass JSON or GeoJSON."""

    def __init__(
        self,
        store: ElementStore,
        *,
        match_points_by_position: bool = True,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.points = PointMaterializer(store, match_by_position=match_points_by_position)
        self.converter = ElementConverter(store, self.points, clock=clock)

    def create_new_instance(self, category: ElementCategory, raw: object) -> Element:
        """Create a new element of ``category`` from ``raw`` without looking it up first."""

        category = require_category(category)
        try:
            osm_id = extract_identity(raw, default_category=category).osm_id
        except MissingIdentityError:
            # GeoJSON features may legitimately arrive without an OSM id
            osm_id = None
        data = self.converter.to_entity(category, raw, osm_id=osm_id)
        return self.store.create(category, data)

    def process_element(
        self,
        raw: object,
        *,
        category: ElementCategory | None = None,
    ) -> Element | None:
        """Reconcile one element; ``None`` when it had to be skipped."""

        return self._reconcile(raw, default_category=category).element

    def find_or_create_one(self, category: ElementCategory, raw: object) -> Element | None:
        return self.process_element(raw, category=category)

    def find_or_create_many(
        self,
        category: ElementCategory | None,
        raws: Sequence[object],
    ) -> list[Element]:
        """Reconcile ``raws`` in order, leaving skipped elements out of the result."""

        return self.reconcile_batch(raws, category=category).elements

    def reconcile_batch(
        self,
        raws: Sequence[object],
        *,
        category: ElementCategory | None = None,
    ) -> ReconcileReport:
        if not isinstance(raws, Sequence) or isinstance(raws, str | bytes | bytearray):
            raise BatchInputError("Data is not iterable, cannot proceed.")

        report = ReconcileReport()
        for index, raw in enumerate(raws):
            report.record(self._reconcile(raw, default_category=category, index=index))

        log.info(
            "Reconciled %s elements: created=%s, updated=%s, unchanged=%s, skipped=%s",
            len(raws),
            report.created,
            report.updated,
            report.unchanged,
            len(report.skipped),
        )
        return report

    def to_interchange(self, entity: Element) -> dict[str, Any]:
        return self.converter.to_interchange(entity)

    def to_feature_collection(self, entities: Iterable[Element]) -> dict[str, Any]:
        return self.converter.to_feature_collection(entities)

    def _reconcile(
        self,
        raw: object,
        *,
        default_category: ElementCategory | None,
        index: int | None = None,
    ) -> ReconcileOutcome:
        try:
            identity = extract_identity(raw, default_category=default_category)
            existing = self.store.find_one(identity.category, identity.osm_id)
            if existing is None:
                data = self.converter.to_entity(identity.category, raw, osm_id=identity.osm_id)
                created = self.store.create(identity.category, data)
                log.debug("Created %s", identity)
                return ReconcileOutcome(ReconcileState.CREATED, created)

            # Native elements only count on first sight.
            if classify(raw) is not WireFormat.INTERCHANGE:
                return ReconcileOutcome(ReconcileState.UNCHANGED, existing)

            self.converter.apply_interchange(existing, raw)
            self.store.save(existing)
            log.debug("Updated %s", identity)
            return ReconcileOutcome(ReconcileState.UPDATED, existing)
        except ReconciliationError as exc:
            diagnostic = SkippedElement(index=index, kind=exc.kind, message=str(exc))
            log.warning("Skipping element %s (%s error): %s", index, exc.kind, exc)
            return ReconcileOutcome(ReconcileState.SKIPPED, diagnostic=diagnostic)

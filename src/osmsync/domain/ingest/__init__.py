"""Reconciliation of Overpass JSON and GeoJSON elements into stored OSM entities."""

from __future__ import annotations

from .categories import normalize_category, require_category
from .classify import classify, parse_element
from .convert import ElementConverter, properties_to_tags
from .documents import document_elements
from .errors import (
    BatchInputError,
    ElementFormatError,
    MissingIdentityError,
    ReconciliationError,
    UnrecognizedTypeError,
)
from .identity import extract_identity
from .points import PointMaterializer
from .reconcile import (
    ElementReconciler,
    ReconcileOutcome,
    ReconcileReport,
    ReconcileState,
    SkippedElement,
)
from .schema import InterchangeElement, NativeElement, ParsedElement

__all__ = [
    "BatchInputError",
    "ElementConverter",
    "ElementFormatError",
    "ElementReconciler",
    "InterchangeElement",
    "MissingIdentityError",
    "NativeElement",
    "ParsedElement",
    "PointMaterializer",
    "ReconcileOutcome",
    "ReconcileReport",
    "ReconcileState",
    "ReconciliationError",
    "SkippedElement",
    "UnrecognizedTypeError",
    "classify",
    "document_elements",
    "extract_identity",
    "normalize_category",
    "parse_element",
    "properties_to_tags",
    "require_category",
]

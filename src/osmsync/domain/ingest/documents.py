"""Unwrapping of whole documents into element batches."""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

from .errors import BatchInputError


def document_elements(document: object) -> list[object]:
    """Return the raw elements of a GeoJSON FeatureCollection, an Overpass response,
    a bare list of elements, or a single element."""

    if isinstance(document, list):
        return list(cast(list[object], document))
    if not isinstance(document, Mapping):
        raise BatchInputError(f"Unsupported document type: {type(document).__name__}")

    mapping = cast(Mapping[str, object], document)
    if mapping.get("type") == "FeatureCollection":
        features = mapping.get("features")
        if not isinstance(features, list):
            raise BatchInputError("FeatureCollection has no feature list")
        return list(cast(list[object], features))
    elements = mapping.get("elements")
    if isinstance(elements, list):
        return list(cast(list[object], elements))
    return [document]

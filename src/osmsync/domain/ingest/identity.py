"""Extraction of the external (category, OSM id) identity from raw elements."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, cast

from osmsync.domain.model import ElementCategory, ElementIdentity

from .categories import normalize_category, require_category
from .errors import MissingIdentityError

if TYPE_CHECKING:
    from osmsync.domain.model import OsmId

_PROPERTY_ID_KEYS = ("@id", "id")


def extract_identity(
    raw: object,
    *,
    default_category: ElementCategory | None = None,
) -> ElementIdentity:
    """Resolve the identity of a raw element.

    Tried in order: a composite ``"<type>/<id>"`` string, the ``osm_type`` and
    ``osm_id`` properties, then the ``type`` and ``id`` of an Overpass element.
    ``default_category`` fills in when an id is present without any type.
    """

    if not isinstance(raw, Mapping):
        raise MissingIdentityError("Element is not a mapping")
    element = cast(Mapping[str, object], raw)
    properties = _properties(element)

    composite = _composite_id(element, properties)
    if composite is not None:
        type_token, _, id_token = composite.partition("/")
        return ElementIdentity(require_category(type_token), _parse_osm_id(id_token))

    if properties.get("osm_id") is not None:
        osm_type = properties.get("osm_type")
        if osm_type is None and default_category is not None:
            category = default_category
        else:
            category = require_category(osm_type)
        return ElementIdentity(category, _parse_osm_id(properties["osm_id"]))

    raw_id = element.get("id")
    if raw_id is not None and not isinstance(raw_id, bool):
        category = normalize_category(element.get("type"))
        if category is ElementCategory.UNRECOGNIZED and default_category is not None:
            category = default_category
        if category is not ElementCategory.UNRECOGNIZED:
            return ElementIdentity(category, _parse_osm_id(raw_id))

    raise MissingIdentityError("Element carries no OSM id and type")


def _properties(element: Mapping[str, object]) -> Mapping[str, object]:
    properties = element.get("properties")
    if isinstance(properties, Mapping):
        return cast(Mapping[str, object], properties)
    return {}


def _composite_id(
    element: Mapping[str, object],
    properties: Mapping[str, object],
) -> str | None:
    candidates = [element.get("id"), *(properties.get(key) for key in _PROPERTY_ID_KEYS)]
    for candidate in candidates:
        if isinstance(candidate, str) and "/" in candidate:
            return candidate
    return None


def _parse_osm_id(value: object) -> OsmId:
    if isinstance(value, bool):
        raise MissingIdentityError(f"Invalid OSM id: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise MissingIdentityError(f"Invalid OSM id: {value!r}") from exc
    raise MissingIdentityError(f"Invalid OSM id: {value!r}")

"""Wire-shape classification of raw elements."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from osmsync.domain.model import WireFormat

from .errors import ElementFormatError
from .schema import InterchangeElement, NativeElement

if TYPE_CHECKING:
    from .schema import ParsedElement


def classify(raw: object) -> WireFormat:
    """Decide which wire shape ``raw`` is in.

    Interchange wins when an element matches both shapes.
    """

    if not isinstance(raw, Mapping):
        return WireFormat.UNKNOWN
    element = cast(Mapping[str, object], raw)
    if isinstance(element.get("geometry"), Mapping) or isinstance(
        element.get("properties"), Mapping
    ):
        return WireFormat.INTERCHANGE
    if not isinstance(element.get("tags"), Mapping):
        return WireFormat.UNKNOWN
    has_member_list = isinstance(element.get("nodes"), list) or isinstance(
        element.get("members"), list
    )
    # Overpass nodes carry their own position instead of a member list.
    has_position = "lat" in element and "lon" in element
    if has_member_list or has_position:
        return WireFormat.NATIVE
    return WireFormat.UNKNOWN


def parse_element(raw: object) -> ParsedElement:
    """Classify ``raw`` and validate it into its wire model."""

    wire_format = classify(raw)
    model: type[NativeElement] | type[InterchangeElement]
    match wire_format:
        case WireFormat.NATIVE:
            model = NativeElement
        case WireFormat.INTERCHANGE:
            model = InterchangeElement
        case _:
            raise ElementFormatError("Element is neither in OSM or GeoJSON format")

    try:
        return model.model_validate(dict(cast(Mapping[str, object], raw)))
    except ValidationError as exc:
        raise ElementFormatError(
            f"Invalid {wire_format} element ({exc.error_count()} validation errors): "
            f"{exc.errors()[0]['msg']}"
        ) from exc

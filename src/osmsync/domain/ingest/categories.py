"""Type token normalization."""

from __future__ import annotations

from typing import Final

from osmsync.domain.model import ElementCategory

from .errors import UnrecognizedTypeError

_CATEGORY_BY_TOKEN: Final[dict[str, ElementCategory]] = {
    "n": ElementCategory.NODE,
    "node": ElementCategory.NODE,
    "w": ElementCategory.WAY,
    "way": ElementCategory.WAY,
    "r": ElementCategory.RELATION,
    "relation": ElementCategory.RELATION,
}


def normalize_category(token: object) -> ElementCategory:
    """Map a type token to its category, or ``UNRECOGNIZED``. Never raises."""

    if not isinstance(token, str):
        return ElementCategory.UNRECOGNIZED
    return _CATEGORY_BY_TOKEN.get(token.strip().lower(), ElementCategory.UNRECOGNIZED)


def require_category(token: object) -> ElementCategory:
    category = normalize_category(token)
    if category is ElementCategory.UNRECOGNIZED:
        raise UnrecognizedTypeError(f"Invalid type: {token!r}")
    return category

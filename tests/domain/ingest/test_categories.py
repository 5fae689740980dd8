from __future__ import annotations

import pytest

from osmsync.domain.ingest import UnrecognizedTypeError, normalize_category, require_category
from osmsync.domain.model import ElementCategory


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("n", ElementCategory.NODE),
        ("N", ElementCategory.NODE),
        ("node", ElementCategory.NODE),
        ("NODE", ElementCategory.NODE),
        ("w", ElementCategory.WAY),
        ("W", ElementCategory.WAY),
        ("way", ElementCategory.WAY),
        ("Way", ElementCategory.WAY),
        ("r", ElementCategory.RELATION),
        ("R", ElementCategory.RELATION),
        ("relation", ElementCategory.RELATION),
        (" relation ", ElementCategory.RELATION),
    ],
)
def test_normalize_category_accepts_known_spellings(token: str, expected: ElementCategory) -> None:
    assert normalize_category(token) is expected


@pytest.mark.parametrize("token", ["", "area", "nodes", "x", None, 1, ["way"]])
def test_normalize_category_returns_sentinel_for_unknown_tokens(token: object) -> None:
    assert normalize_category(token) is ElementCategory.UNRECOGNIZED


def test_require_category_raises_for_unknown_token() -> None:
    with pytest.raises(UnrecognizedTypeError, match="Invalid type"):
        require_category("area")


def test_require_category_accepts_category_values() -> None:
    assert require_category(ElementCategory.WAY) is ElementCategory.WAY

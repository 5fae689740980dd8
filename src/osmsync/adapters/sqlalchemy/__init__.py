"""SQLAlchemy adapter package for osmsync."""

from __future__ import annotations

from .mappings import (
    CLASS_BY_CATEGORY,
    TABLE_BY_CATEGORY,
    mapper_registry,
    start_mappers,
)
from .repositories import SqlAlchemyElementStore, UnknownCategoryError

__all__ = [
    "CLASS_BY_CATEGORY",
    "TABLE_BY_CATEGORY",
    "SqlAlchemyElementStore",
    "UnknownCategoryError",
    "mapper_registry",
    "start_mappers",
]

"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import ElementStore
from .unit_of_work import (
    ElementRepositories,
    ElementUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ElementRepositories",
    "ElementStore",
    "ElementUnitOfWork",
    "RepositoryCollection",
    "UnitOfWork",
]

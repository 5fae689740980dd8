"""Reconciliation error taxonomy.

Format, identity and type errors are per-element: a batch logs them and moves on.
``BatchInputError`` is a caller bug and aborts before any store access.
"""

from __future__ import annotations


class ReconciliationError(ValueError):
    """Base class for errors raised while reconciling raw elements."""

    kind: str = "reconciliation"


class ElementFormatError(ReconciliationError):
    """Element matches neither the native-graph nor the interchange shape."""

    kind = "format"


class MissingIdentityError(ReconciliationError):
    """No (category, OSM id) pair could be extracted from the element."""

    kind = "identity"


class UnrecognizedTypeError(ReconciliationError):
    """A type token does not name a known element category."""

    kind = "type"


class BatchInputError(TypeError):
    """Batch input is not an ordered sequence of raw elements."""

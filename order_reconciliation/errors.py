"""Error types raised at the boundary of the reconciliation engine."""

from __future__ import annotations

from typing import Any


class ReconciliationError(ValueError):
    """Base error for malformed engine input."""

    def __init__(self, message: str, *, field: str | None = None, value: Any = None) -> None:
        self.message = message
        self.field = field
        self.value = value
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "field": self.field,
            "value": repr(self.value)[:100] if self.value is not None else None,
        }


class InvalidInputError(ReconciliationError):
    """Argument is not a collection or sequence of the expected shape."""


class InvalidOrderingShapeError(ReconciliationError):
    """An ordering-like record is missing a usable item sequence."""


class InvalidWeightError(ReconciliationError):
    """Merge weight outside [0, 1]."""

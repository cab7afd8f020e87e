"""Structural checks of a candidate consensus against its source orderings."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..errors import ReconciliationError
from ..ordering import coerce_ordering


@dataclass(slots=True)
class ValidationResult:
    """Outcome of ``validate_consensus``; ``errors`` lists every violation found."""

    valid: bool
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


def _source_items(orderings: Any, errors: list[str]) -> list[str]:
    """Union of identifiers across well-formed source orderings, first-seen order."""
    if orderings is None or isinstance(orderings, (str, bytes, Mapping)) or not isinstance(orderings, Iterable):
        errors.append("Source orderings must be a collection")
        return []

    seen: dict[str, None] = {}
    for idx, record in enumerate(orderings):
        try:
            ordering = coerce_ordering(record)
        except ReconciliationError as exc:
            errors.append(f"Source ordering {idx} is malformed: {exc.message}")
            continue
        for item in ordering.items:
            seen.setdefault(item, None)
    return list(seen)


def validate_consensus(consensus: Any, orderings: Any) -> ValidationResult:
    """Check that ``consensus`` is a permutation of the identifiers in ``orderings``.

    Never raises: all violations are collected so they can be shown at once.
    """
    errors: list[str] = []

    if isinstance(consensus, str) or not isinstance(consensus, (list, tuple)):
        errors.append("Consensus must be an ordered sequence")
        return ValidationResult(valid=False, errors=errors)

    try:
        counts = Counter(consensus)
    except TypeError:
        errors.append("Consensus contains unhashable identifiers")
        return ValidationResult(valid=False, errors=errors)

    duplicates = [item for item, count in counts.items() if count > 1]
    if duplicates:
        errors.append(f"Consensus contains duplicate files: {', '.join(map(str, duplicates))}")

    expected = _source_items(orderings, errors)
    expected_set = set(expected)

    missing = [item for item in expected if item not in counts]
    if missing:
        errors.append(f"Consensus missing files: {', '.join(missing)}")

    extra = [item for item in counts if item not in expected_set]
    if extra:
        errors.append(f"Consensus has extra files: {', '.join(map(str, extra))}")

    return ValidationResult(valid=not errors, errors=errors)

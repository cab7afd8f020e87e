"""Per-identifier position collection across orderings."""

from __future__ import annotations

from typing import Any

from ..ordering import Ordering, coerce_orderings, non_empty

PositionIndex = dict[str, list[int]]


def index_positions(orderings: list[Ordering]) -> PositionIndex:
    """Collect positions from already-normalized orderings, skipping empty ones.

    Keys keep first-appearance order (orderings scanned in input order), which
    is the deterministic tie-break used by the consensus calculator.
    """
    index: PositionIndex = {}
    for ordering in non_empty(orderings):
        for position, item in enumerate(ordering.items):
            index.setdefault(item, []).append(position)
    return index


def build_position_index(orderings: Any) -> PositionIndex:
    """Build the position index for a collection of ordering-like records."""
    return index_positions(coerce_orderings(orderings))

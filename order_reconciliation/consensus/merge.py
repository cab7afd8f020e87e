"""Weighted blending of a prior consensus with one new ordering."""

from __future__ import annotations

import math
from numbers import Real
from typing import Any

from ..errors import InvalidWeightError
from ..evaluation.metrics import position_map
from ..ordering import as_item_sequence


def _checked_weight(weight: Any) -> float:
    if isinstance(weight, bool) or not isinstance(weight, Real) or math.isnan(weight):
        raise InvalidWeightError("weight must be a number between 0 and 1", field="weight", value=weight)
    if weight < 0 or weight > 1:
        raise InvalidWeightError(f"weight must be between 0 and 1, got {weight}", field="weight", value=weight)
    return float(weight)


def merge_order(consensus: Any, new_ordering: Any, weight: float) -> list[str]:
    """Blend ``new_ordering`` into ``consensus``.

    Each identifier gets ``(1 - weight) * consensus_pos + weight * new_pos``; an
    identifier missing from one side is placed at that side's length. Ties keep
    consensus order, then new-ordering order for identifiers only it contains.
    """
    base = as_item_sequence(consensus, field_name="consensus")
    incoming = as_item_sequence(new_ordering, field_name="new_ordering")
    w = _checked_weight(weight)

    base_pos = position_map(base)
    new_pos = position_map(incoming)

    candidates = list(base)
    candidates.extend(item for item in incoming if item not in base_pos)

    def blended(item: str) -> float:
        a = base_pos.get(item, len(base))
        b = new_pos.get(item, len(incoming))
        return (1.0 - w) * a + w * b

    return sorted(candidates, key=blended)

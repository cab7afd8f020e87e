"""Core positional statistics shared by the consensus and evaluation modules."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np


def mean(values: Iterable[float]) -> float:
    """Safe arithmetic mean."""
    values_list = list(values)
    if not values_list:
        return 0.0
    return float(np.mean(values_list))


def population_std(values: Iterable[float]) -> float:
    """Population standard deviation (ddof=0); 0.0 for fewer than two values."""
    values_list = list(values)
    if len(values_list) < 2:
        return 0.0
    return float(np.std(values_list))


def median(values: Iterable[float]) -> float:
    """Median of the values, 0.0 when empty."""
    values_list = list(values)
    if not values_list:
        return 0.0
    return float(np.median(values_list))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negative input."""
    return int(math.floor(value + 0.5))


def position_map(items: Sequence[str]) -> dict[str, int]:
    """Map each identifier to its zero-based index."""
    return {item: idx for idx, item in enumerate(items)}


def footrule_displacement(items: Sequence[str], ranks: dict[str, int]) -> int:
    """Sum of |index in ``items`` - rank| over identifiers that have a rank."""
    return sum(abs(idx - ranks[item]) for idx, item in enumerate(items) if item in ranks)


def max_footrule(size: int) -> int:
    """Largest possible footrule distance between two permutations of ``size`` items."""
    return (size * size) // 2


def relative_agreement(items: Sequence[str], reference: Sequence[str]) -> float:
    """Normalized footrule agreement of ``items`` against ``reference`` in [0, 1].

    The reference is projected onto the identifiers of ``items`` first, so only
    relative placement matters: ``[a, c]`` fully agrees with ``[a, b, c]``.
    Identifiers missing from the reference keep their own relative order after
    the projected ones.
    """
    if len(items) <= 1:
        return 1.0
    present = set(items)
    projected = [item for item in reference if item in present]
    projected_set = set(projected)
    projected.extend(item for item in items if item not in projected_set)

    worst = max_footrule(len(items))
    distance = footrule_displacement(items, position_map(projected))
    return clamp(1.0 - distance / worst, 0.0, 1.0)

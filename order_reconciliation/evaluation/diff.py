"""Pairwise difference and similarity between two orderings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..ordering import as_item_sequence
from .metrics import clamp, position_map, round_half_up

DEFAULT_LARGE_MOVE_THRESHOLD = 10


class ChangeKind(str, Enum):
    UNCHANGED = "unchanged"
    MOVED_UP = "moved-up"
    MOVED_DOWN = "moved-down"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(slots=True)
class DiffRecord:
    """Where one identifier sits in each ordering; ``None`` marks absence."""

    item: str
    position_a: int | None
    position_b: int | None
    change: ChangeKind
    distance: int
    is_large_move: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "item": self.item,
            "position_a": self.position_a,
            "position_b": self.position_b,
            "change": self.change.value,
            "distance": self.distance,
            "is_large_move": self.is_large_move,
        }


@dataclass(slots=True)
class OrderDiff:
    """Per-item deltas plus a symmetric 0-100 similarity score."""

    records: list[DiffRecord]
    similarity_score: int
    total_displacement: int = 0

    def of_kind(self, *kinds: ChangeKind) -> list[DiffRecord]:
        wanted = set(kinds)
        return [record for record in self.records if record.change in wanted]

    @property
    def unchanged(self) -> list[DiffRecord]:
        return self.of_kind(ChangeKind.UNCHANGED)

    @property
    def moved(self) -> list[DiffRecord]:
        return self.of_kind(ChangeKind.MOVED_UP, ChangeKind.MOVED_DOWN)

    @property
    def added(self) -> list[DiffRecord]:
        return self.of_kind(ChangeKind.ADDED)

    @property
    def removed(self) -> list[DiffRecord]:
        return self.of_kind(ChangeKind.REMOVED)

    def summary(self) -> dict[str, int]:
        """Count of records per change kind, plus large moves."""
        counts = {kind.value: len(self.of_kind(kind)) for kind in ChangeKind}
        counts["large_moves"] = sum(1 for record in self.records if record.is_large_move)
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "similarity_score": self.similarity_score,
            "total_displacement": self.total_displacement,
            "summary": self.summary(),
            "records": [record.to_dict() for record in self.records],
        }


def _classify(pos_a: int | None, pos_b: int | None) -> ChangeKind:
    if pos_a is None:
        return ChangeKind.ADDED
    if pos_b is None:
        return ChangeKind.REMOVED
    if pos_b == pos_a:
        return ChangeKind.UNCHANGED
    return ChangeKind.MOVED_DOWN if pos_b > pos_a else ChangeKind.MOVED_UP


def similarity_from_displacement(total_displacement: int, size: int) -> int:
    """Map total displacement over ``size`` identifiers onto a 0-100 score."""
    if size <= 1:
        return 100
    max_displacement = size * (size - 1)
    raw = 100.0 * (1.0 - total_displacement / max_displacement)
    return int(clamp(round_half_up(raw), 0, 100))


def calculate_order_diff(
    ordering_a: Any,
    ordering_b: Any,
    *,
    large_move_threshold: int = DEFAULT_LARGE_MOVE_THRESHOLD,
) -> OrderDiff:
    """Compare two orderings item by item.

    Absent identifiers are placed at the union size ``n`` when measuring
    displacement, so the total (and the score) is the same in both directions.
    """
    items_a = as_item_sequence(ordering_a, field_name="ordering_a")
    items_b = as_item_sequence(ordering_b, field_name="ordering_b")

    pos_a = position_map(items_a)
    pos_b = position_map(items_b)

    union = list(items_a)
    union.extend(item for item in items_b if item not in pos_a)
    size = len(union)

    records: list[DiffRecord] = []
    total = 0
    for item in union:
        a = pos_a.get(item)
        b = pos_b.get(item)
        distance = (size if b is None else b) - (size if a is None else a)
        total += abs(distance)
        change = _classify(a, b)
        records.append(
            DiffRecord(
                item=item,
                position_a=a,
                position_b=b,
                change=change,
                distance=distance,
                is_large_move=change in (ChangeKind.MOVED_UP, ChangeKind.MOVED_DOWN)
                and abs(distance) > large_move_threshold,
            )
        )

    return OrderDiff(
        records=records,
        similarity_score=similarity_from_displacement(total, size),
        total_displacement=total,
    )

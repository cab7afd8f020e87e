"""Agreement and conflict analysis of orderings against their consensus.

Keys of ``ConsensusMetadata.to_dict``:
  - participant_count: number of non-empty orderings
  - agreement_score: mean normalized footrule agreement in [0, 1]
  - agreement_level: high / medium / low bucket of the score
  - conflicts: identifiers with widely varying positions, most controversial first
  - most_recent_timestamp: latest ``created_at`` among contributing orderings
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..consensus.position_index import index_positions
from ..ordering import as_item_sequence, coerce_orderings, non_empty
from .metrics import mean, population_std, relative_agreement

DEFAULT_CONFLICT_RATIO = 0.2
DEFAULT_MAX_CONFLICTS = 5
DEFAULT_HIGH_AGREEMENT = 0.8
DEFAULT_MEDIUM_AGREEMENT = 0.6


class AgreementLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def agreement_level(
    score: float,
    *,
    high: float = DEFAULT_HIGH_AGREEMENT,
    medium: float = DEFAULT_MEDIUM_AGREEMENT,
) -> AgreementLevel:
    """Bucket an agreement score for display."""
    if score >= high:
        return AgreementLevel.HIGH
    if score >= medium:
        return AgreementLevel.MEDIUM
    return AgreementLevel.LOW


@dataclass(slots=True)
class ConflictRecord:
    """An identifier whose observed positions vary widely across orderings."""

    item: str
    positions: list[int]
    mean_position: float
    standard_deviation: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "item": self.item,
            "positions": list(self.positions),
            "mean_position": self.mean_position,
            "standard_deviation": self.standard_deviation,
        }


@dataclass(slots=True)
class ConsensusMetadata:
    """Summary statistics about how well orderings agree with a consensus."""

    participant_count: int
    agreement_score: float
    conflicts: list[ConflictRecord] = field(default_factory=list)
    most_recent_timestamp: datetime | None = None
    agreement_level: AgreementLevel = AgreementLevel.LOW

    def to_dict(self) -> dict[str, Any]:
        return {
            "participant_count": self.participant_count,
            "agreement_score": self.agreement_score,
            "agreement_level": self.agreement_level.value,
            "conflicts": [conflict.to_dict() for conflict in self.conflicts],
            "most_recent_timestamp": self.most_recent_timestamp.isoformat() if self.most_recent_timestamp else None,
        }


def find_conflicts(
    index: dict[str, list[int]],
    threshold: float,
    max_conflicts: int | None = DEFAULT_MAX_CONFLICTS,
) -> list[ConflictRecord]:
    """Conflict records for identifiers seen at least twice with std above ``threshold``."""
    conflicts: list[ConflictRecord] = []
    for item, positions in index.items():
        if len(positions) < 2:
            continue
        std = population_std(positions)
        if std > threshold:
            conflicts.append(
                ConflictRecord(
                    item=item,
                    positions=list(positions),
                    mean_position=mean(positions),
                    standard_deviation=std,
                )
            )

    conflicts.sort(key=lambda record: record.standard_deviation, reverse=True)
    if max_conflicts is not None:
        conflicts = conflicts[: max(0, max_conflicts)]
    return conflicts


def get_consensus_metadata(
    orderings: Any,
    consensus: Any,
    *,
    conflict_ratio: float = DEFAULT_CONFLICT_RATIO,
    conflict_threshold: float | None = None,
    max_conflicts: int | None = DEFAULT_MAX_CONFLICTS,
    high_agreement: float = DEFAULT_HIGH_AGREEMENT,
    medium_agreement: float = DEFAULT_MEDIUM_AGREEMENT,
) -> ConsensusMetadata:
    """Compute participant count, agreement, conflicts and recency.

    ``conflict_threshold`` is an absolute standard deviation; when omitted it is
    ``conflict_ratio * len(consensus)``. ``max_conflicts=None`` disables the cap.
    """
    contributing = non_empty(coerce_orderings(orderings))
    consensus_items = as_item_sequence(consensus, field_name="consensus")

    if not contributing:
        return ConsensusMetadata(participant_count=0, agreement_score=0.0)

    score = mean(relative_agreement(ordering.items, consensus_items) for ordering in contributing)

    threshold = conflict_threshold if conflict_threshold is not None else conflict_ratio * len(consensus_items)
    conflicts = find_conflicts(index_positions(contributing), threshold, max_conflicts)

    timestamps = [ordering.created_at for ordering in contributing if ordering.created_at is not None]

    return ConsensusMetadata(
        participant_count=len(contributing),
        agreement_score=score,
        conflicts=conflicts,
        most_recent_timestamp=max(timestamps) if timestamps else None,
        agreement_level=agreement_level(score, high=high_agreement, medium=medium_agreement),
    )

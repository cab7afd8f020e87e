"""Serializable bundle of one reconciliation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .consensus.validator import ValidationResult
from .evaluation.diff import OrderDiff
from .evaluation.metadata import ConsensusMetadata
from .utils.io import atomic_write_json


@dataclass(slots=True)
class ReconciliationReport:
    """Consensus plus everything computed about it."""

    generated_at: str
    consensus: list[str]
    metadata: ConsensusMetadata
    validation: ValidationResult
    config: dict[str, Any] = field(default_factory=dict)
    excluded_participants: list[str] = field(default_factory=list)
    participant_similarity: dict[str, int] = field(default_factory=dict)
    reference_diff: OrderDiff | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to serializable dictionary."""
        return {
            "generated_at": self.generated_at,
            "consensus": list(self.consensus),
            "metadata": self.metadata.to_dict(),
            "validation": self.validation.to_dict(),
            "config": dict(self.config),
            "excluded_participants": list(self.excluded_participants),
            "participant_similarity": dict(self.participant_similarity),
            "reference_diff": self.reference_diff.to_dict() if self.reference_diff else None,
        }

    def save(self, path: Path) -> Path:
        """Write report to JSON file atomically."""
        return atomic_write_json(path, self.to_dict())

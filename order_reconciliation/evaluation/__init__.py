"""Agreement, conflict and difference measurements over orderings."""

from .diff import ChangeKind, DiffRecord, OrderDiff, calculate_order_diff, similarity_from_displacement
from .metadata import (
    AgreementLevel,
    ConflictRecord,
    ConsensusMetadata,
    agreement_level,
    find_conflicts,
    get_consensus_metadata,
)
from .metrics import relative_agreement

__all__ = [
    "ChangeKind",
    "DiffRecord",
    "OrderDiff",
    "calculate_order_diff",
    "similarity_from_displacement",
    "AgreementLevel",
    "ConflictRecord",
    "ConsensusMetadata",
    "agreement_level",
    "find_conflicts",
    "get_consensus_metadata",
    "relative_agreement",
]

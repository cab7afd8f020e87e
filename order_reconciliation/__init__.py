"""Order reconciliation engine: consensus, agreement and diffs over item orderings."""

from .config import EngineConfig, load_config
from .consensus import (
    ConsensusOptions,
    ValidationResult,
    build_position_index,
    calculate_consensus,
    merge_order,
    validate_consensus,
)
from .errors import InvalidInputError, InvalidOrderingShapeError, InvalidWeightError, ReconciliationError
from .evaluation import (
    AgreementLevel,
    ChangeKind,
    ConflictRecord,
    ConsensusMetadata,
    DiffRecord,
    OrderDiff,
    calculate_order_diff,
    get_consensus_metadata,
)
from .ordering import Ordering
from .reconciler import reconcile
from .report import ReconciliationReport

__all__ = [
    "EngineConfig",
    "load_config",
    "ConsensusOptions",
    "ValidationResult",
    "build_position_index",
    "calculate_consensus",
    "merge_order",
    "validate_consensus",
    "InvalidInputError",
    "InvalidOrderingShapeError",
    "InvalidWeightError",
    "ReconciliationError",
    "AgreementLevel",
    "ChangeKind",
    "ConflictRecord",
    "ConsensusMetadata",
    "DiffRecord",
    "OrderDiff",
    "calculate_order_diff",
    "get_consensus_metadata",
    "Ordering",
    "reconcile",
    "ReconciliationReport",
]

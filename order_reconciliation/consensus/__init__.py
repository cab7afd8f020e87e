"""Consensus construction, blending and validation."""

from .calculator import ConsensusOptions, calculate_consensus, find_outliers, rank_by_mean_position
from .merge import merge_order
from .position_index import PositionIndex, build_position_index
from .validator import ValidationResult, validate_consensus

__all__ = [
    "ConsensusOptions",
    "calculate_consensus",
    "find_outliers",
    "rank_by_mean_position",
    "merge_order",
    "PositionIndex",
    "build_position_index",
    "ValidationResult",
    "validate_consensus",
]

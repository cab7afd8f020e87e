"""Mean-position consensus with deterministic tie-breaking and outlier exclusion."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
import logging
import math
from numbers import Real
from typing import Any

from ..errors import InvalidInputError
from ..evaluation.metrics import footrule_displacement, mean, median, position_map
from ..ordering import Ordering, coerce_orderings, non_empty
from .position_index import index_positions

LOGGER = logging.getLogger(__name__)

MIN_ORDERINGS_FOR_OUTLIERS = 3


@dataclass(slots=True)
class ConsensusOptions:
    """Tuning knobs for ``calculate_consensus``."""

    exclude_outliers: bool = False
    outlier_factor: float = 2.0

    def __post_init__(self) -> None:
        factor = self.outlier_factor
        if isinstance(factor, bool) or not isinstance(factor, Real) or math.isnan(factor) or factor <= 0:
            raise InvalidInputError("outlier_factor must be a positive number", field="outlier_factor", value=factor)

    @classmethod
    def coerce(cls, options: Any) -> "ConsensusOptions":
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            known = {f.name for f in fields(cls)}
            unknown = sorted(set(options) - known)
            if unknown:
                raise InvalidInputError(f"Unknown consensus options: {', '.join(unknown)}", field="options", value=options)
            return cls(**options)
        raise InvalidInputError("options must be ConsensusOptions or a mapping", field="options", value=options)


def rank_by_mean_position(orderings: list[Ordering]) -> list[str]:
    """Sort identifiers by mean observed position; ties keep first-appearance order."""
    index = index_positions(orderings)
    means = {item: mean(positions) for item, positions in index.items()}
    # sorted() is stable and the index preserves first appearance.
    return sorted(index, key=means.__getitem__)


def ordering_displacements(orderings: list[Ordering], consensus: list[str]) -> list[int]:
    """Footrule displacement of each ordering against the ranks in ``consensus``."""
    ranks = position_map(consensus)
    return [footrule_displacement(ordering.items, ranks) for ordering in orderings]


def find_outliers(orderings: list[Ordering], outlier_factor: float = 2.0) -> list[int]:
    """Return indices of orderings displaced far more than the median ordering.

    An ordering is flagged when its displacement from the unfiltered trial
    consensus exceeds both the median and ``outlier_factor`` times the median.
    """
    if len(orderings) < MIN_ORDERINGS_FOR_OUTLIERS:
        return []
    trial = rank_by_mean_position(orderings)
    displacements = ordering_displacements(orderings, trial)
    middle = median(displacements)
    cutoff = outlier_factor * middle
    return [
        idx
        for idx, displacement in enumerate(displacements)
        if displacement > middle and displacement > cutoff
    ]


def calculate_consensus(orderings: Any, options: ConsensusOptions | Mapping[str, Any] | None = None) -> list[str]:
    """Reconcile orderings into one consensus ordering.

    Empty orderings are ignored. A single contributing ordering is returned as a
    copy. Otherwise identifiers are ranked by mean position across the
    orderings that contain them.
    """
    opts = ConsensusOptions.coerce(options)
    contributing = non_empty(coerce_orderings(orderings))

    if not contributing:
        return []
    if len(contributing) == 1:
        return list(contributing[0].items)

    if not opts.exclude_outliers:
        return rank_by_mean_position(contributing)

    flagged = set(find_outliers(contributing, opts.outlier_factor))
    kept = [ordering for idx, ordering in enumerate(contributing) if idx not in flagged]
    if not flagged or not kept:
        return rank_by_mean_position(contributing)

    LOGGER.debug(
        "Excluding %d outlier ordering(s): %s",
        len(flagged),
        [contributing[idx].participant or idx for idx in sorted(flagged)],
    )
    consensus = rank_by_mean_position(kept)
    # Identifiers only proposed by excluded orderings still belong in the result.
    placed = set(consensus)
    consensus.extend(item for item in rank_by_mean_position(contributing) if item not in placed)
    return consensus

"""One-call reconciliation: consensus, metadata, validation and diffs."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from .config import EngineConfig
from .consensus import calculate_consensus, find_outliers, validate_consensus
from .evaluation import calculate_order_diff, get_consensus_metadata
from .ordering import Ordering, coerce_orderings, non_empty
from .report import ReconciliationReport
from .utils.io import utc_now_iso


def participant_label(ordering: Ordering, index: int) -> str:
    """Display key for an ordering: its participant id, else its input position."""
    return ordering.participant or f"ordering_{index}"


def participant_labels(orderings: list[Ordering]) -> list[str]:
    """One distinct display key per ordering.

    A participant that contributed several orderings is told apart by source
    (``ana[cached]``), falling back to input position (``ana#1``).
    """
    base = [participant_label(ordering, idx) for idx, ordering in enumerate(orderings)]
    repeated = {label for label, count in Counter(base).items() if count > 1}

    labels = [
        f"{label}[{ordering.source}]" if label in repeated and ordering.source else label
        for label, ordering in zip(base, orderings)
    ]
    counts = Counter(labels)
    return [label if counts[label] == 1 else f"{label}#{idx}" for idx, label in enumerate(labels)]


def reconcile(
    orderings: Any,
    config: EngineConfig | None = None,
    logger: logging.Logger | None = None,
    reference: Any = None,
) -> ReconciliationReport:
    """Run the full engine over ``orderings`` and bundle the results.

    ``reference`` is an optional ordering (for example the current file order)
    that the consensus is diffed against.
    """
    config = config or EngineConfig()
    logger = logger or logging.getLogger(__name__)

    normalized = coerce_orderings(orderings)
    contributing = non_empty(normalized)
    logger.info(
        "Reconciling orderings total=%d contributing=%d exclude_outliers=%s",
        len(normalized),
        len(contributing),
        config.exclude_outliers,
    )

    consensus = calculate_consensus(contributing, config.consensus_options())
    labels = participant_labels(contributing)

    excluded: list[str] = []
    if config.exclude_outliers:
        excluded = [labels[idx] for idx in find_outliers(contributing, config.outlier_factor)]
        if excluded:
            logger.info("Outlier orderings excluded: %s", ", ".join(excluded))

    metadata = get_consensus_metadata(
        contributing,
        consensus,
        conflict_ratio=config.conflict_ratio,
        max_conflicts=config.max_conflicts,
        high_agreement=config.high_agreement,
        medium_agreement=config.medium_agreement,
    )

    validation = validate_consensus(consensus, contributing)
    if not validation.valid:
        for error in validation.errors:
            logger.warning("Consensus validation: %s", error)

    similarity = {
        label: calculate_order_diff(
            ordering, consensus, large_move_threshold=config.large_move_threshold
        ).similarity_score
        for label, ordering in zip(labels, contributing)
    }

    reference_diff = None
    if reference is not None:
        reference_diff = calculate_order_diff(
            reference, consensus, large_move_threshold=config.large_move_threshold
        )
        logger.info("Consensus vs reference similarity=%d", reference_diff.similarity_score)

    logger.info(
        "Consensus items=%d participants=%d agreement=%.2f (%s) conflicts=%d",
        len(consensus),
        metadata.participant_count,
        metadata.agreement_score,
        metadata.agreement_level.value,
        len(metadata.conflicts),
    )

    return ReconciliationReport(
        generated_at=utc_now_iso(),
        consensus=consensus,
        metadata=metadata,
        validation=validation,
        config=config.to_dict(),
        excluded_participants=excluded,
        participant_similarity=similarity,
        reference_diff=reference_diff,
    )

"""Tests for weighted order merging."""

from __future__ import annotations

import pytest

from order_reconciliation.consensus import merge_order
from order_reconciliation.errors import InvalidInputError, InvalidWeightError
from order_reconciliation.ordering import Ordering


def test_weight_zero_keeps_consensus_order() -> None:
    """Weight 0 keeps the consensus and appends new items."""
    assert merge_order(["a", "b", "c"], ["c", "b", "a"], 0) == ["a", "b", "c"]
    assert merge_order(["a", "b", "c"], ["d", "b"], 0) == ["a", "b", "c", "d"]


def test_weight_one_keeps_new_order_and_appends_consensus_only_items() -> None:
    """Weight 1 follows the new ordering."""
    assert merge_order(["a", "b", "c"], ["c", "b", "a"], 1) == ["c", "b", "a"]
    assert merge_order(["a", "b", "c"], ["d", "b"], 1) == ["d", "b", "a", "c"]


def test_intermediate_weights_blend_positions() -> None:
    """Intermediate weights move items part of the way."""
    consensus = ["a", "b", "c", "d"]
    new = ["d", "c", "b", "a"]
    assert merge_order(consensus, new, 0.25) == ["a", "b", "c", "d"]
    assert merge_order(consensus, new, 0.75) == ["d", "c", "b", "a"]
    # Every blended position is 1.5, so consensus order wins the tie.
    assert merge_order(consensus, new, 0.5) == ["a", "b", "c", "d"]


def test_empty_consensus_takes_new_ordering() -> None:
    """Merging into nothing yields the new ordering."""
    assert merge_order([], ["a", "b"], 0.3) == ["a", "b"]


def test_accepts_ordering_records_and_does_not_mutate() -> None:
    """Ordering records are accepted and inputs stay unchanged."""
    consensus = ["a", "b"]
    result = merge_order(consensus, Ordering(items=("b", "a"), participant="reviewer"), 1)
    assert result == ["b", "a"]
    assert consensus == ["a", "b"]


@pytest.mark.parametrize("weight", [-0.1, 1.1, float("nan"), "0.5", None, True])
def test_rejects_invalid_weight(weight) -> None:
    """Weights outside [0, 1] or of the wrong type are rejected."""
    with pytest.raises(InvalidWeightError):
        merge_order(["a"], ["a"], weight)


@pytest.mark.parametrize("bad", ["abc", None, {"a": 1}, 3])
def test_rejects_non_sequence(bad) -> None:
    """Either argument must be a sequence."""
    with pytest.raises(InvalidInputError):
        merge_order(bad, ["a"], 0.5)
    with pytest.raises(InvalidInputError):
        merge_order(["a"], bad, 0.5)

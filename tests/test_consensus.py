"""Tests for the mean-position consensus calculator."""

from __future__ import annotations

import random

import pytest

from order_reconciliation.consensus import (
    ConsensusOptions,
    build_position_index,
    calculate_consensus,
    find_outliers,
    validate_consensus,
)
from order_reconciliation.errors import InvalidInputError, InvalidOrderingShapeError
from order_reconciliation.ordering import Ordering


def _records(*orders: list[str]) -> list[dict]:
    return [{"participant": f"user{idx}", "items": list(order)} for idx, order in enumerate(orders)]


def test_position_index_collects_positions_in_first_appearance_order() -> None:
    """Index keys follow first appearance and hold every observed position."""
    index = build_position_index(_records(["a", "b", "c"], [], ["c", "a"]))
    assert list(index) == ["a", "b", "c"]
    assert index == {"a": [0, 1], "b": [1], "c": [2, 0]}


def test_position_index_of_empty_input_is_empty() -> None:
    """No orderings, or only empty ones, give an empty index."""
    assert build_position_index([]) == {}
    assert build_position_index(_records([], [])) == {}


def test_clear_majority() -> None:
    """Two identical orderings outvote one swap."""
    orderings = _records(["a", "b", "c"], ["a", "b", "c"], ["a", "c", "b"])
    assert calculate_consensus(orderings) == ["a", "b", "c"]


def test_empty_inputs_yield_empty_consensus() -> None:
    """No contributing orderings means an empty consensus."""
    assert calculate_consensus([]) == []
    assert calculate_consensus(_records([], [])) == []


def test_single_ordering_is_returned_as_copy() -> None:
    """One ordering is its own consensus, returned as a new list."""
    items = ["src/b.py", "src/a.py", "README.md"]
    result = calculate_consensus([items])
    assert result == items
    assert result is not items


def test_empty_orderings_are_no_vote() -> None:
    """Empty orderings do not affect the result."""
    assert calculate_consensus(_records([], ["x", "y"], [])) == ["x", "y"]


def test_ties_break_by_first_appearance() -> None:
    """Equal mean positions keep first-appearance order."""
    assert calculate_consensus(_records(["a", "b"], ["b", "a"])) == ["a", "b"]
    assert calculate_consensus(_records(["b", "a"], ["a", "b"])) == ["b", "a"]


def test_disjoint_sets_are_all_kept() -> None:
    """Orderings with no shared items still contribute every item."""
    result = calculate_consensus([["a", "b"], ["c", "d"]])
    assert len(result) == 4
    assert set(result) == {"a", "b", "c", "d"}
    assert result == ["a", "c", "b", "d"]


def test_reversed_outlier_is_excluded() -> None:
    """A full reversal against a unanimous majority is flagged."""
    orderings = _records(["a", "b", "c", "d"], ["a", "b", "c", "d"], ["a", "b", "c", "d"], ["d", "c", "b", "a"])
    normalized = [Ordering.from_dict(record) for record in orderings]
    assert find_outliers(normalized) == [3]
    assert calculate_consensus(orderings, {"exclude_outliers": True}) == ["a", "b", "c", "d"]


def test_outlier_exclusion_changes_result() -> None:
    """Dropping the outlier flips the consensus."""
    orderings = _records(
        ["a", "b", "c"],
        ["b", "a", "c"],
        ["a", "b", "c"],
        ["b", "a", "c"],
        ["c", "b", "a"],
    )
    assert calculate_consensus(orderings) == ["b", "a", "c"]
    options = ConsensusOptions(exclude_outliers=True, outlier_factor=1.5)
    assert calculate_consensus(orderings, options) == ["a", "b", "c"]


def test_items_only_in_excluded_ordering_are_appended() -> None:
    """Items seen only in an excluded ordering still end up in the consensus."""
    orderings = _records(["a", "b", "c"], ["a", "b", "c"], ["a", "b", "c"], ["x", "c", "b", "a"])
    result = calculate_consensus(orderings, {"exclude_outliers": True, "outlier_factor": 1.2})
    assert result == ["a", "b", "c", "x"]
    assert validate_consensus(result, orderings).valid


def test_outliers_need_three_orderings() -> None:
    """Two orderings are never enough to call one an outlier."""
    normalized = [Ordering(items=("a", "b")), Ordering(items=("b", "a"))]
    assert find_outliers(normalized) == []


def test_unknown_option_rejected() -> None:
    """Unknown option keys raise InvalidInputError."""
    with pytest.raises(InvalidInputError):
        calculate_consensus([["a"]], {"drop_outliers": True})


@pytest.mark.parametrize("factor", ["2", float("nan"), True, 0, -1.0])
def test_rejects_invalid_outlier_factor(factor) -> None:
    """Non-numeric, NaN and non-positive factors are rejected."""
    with pytest.raises(InvalidInputError):
        calculate_consensus([["a"]], {"exclude_outliers": True, "outlier_factor": factor})


@pytest.mark.parametrize("bad", [None, "a,b,c", b"ab", 42, {"items": ["a"]}])
def test_rejects_non_collection(bad) -> None:
    """Inputs that are not a collection of orderings are rejected."""
    with pytest.raises(InvalidInputError):
        calculate_consensus(bad)


@pytest.mark.parametrize(
    "record",
    [
        {"participant": "x"},
        42,
        {"items": "abc"},
        {"items": ["a", "a"]},
        {"order": ["a", 3]},
        {"items": ["a"], "metadata": 5},
        {"items": ["a"], "metadata": ["x"]},
    ],
)
def test_rejects_malformed_ordering(record) -> None:
    """A malformed record anywhere in the input raises a shape error."""
    with pytest.raises(InvalidOrderingShapeError):
        calculate_consensus([{"items": ["a"]}, record])


def test_input_orderings_are_not_mutated() -> None:
    """Caller records are left untouched."""
    records = _records(["a", "b", "c"], ["c", "b", "a"], ["b", "c", "a"])
    snapshot = [dict(record, items=list(record["items"])) for record in records]
    calculate_consensus(records, {"exclude_outliers": True})
    assert records == snapshot


def test_consensus_is_permutation_of_inputs() -> None:
    """Randomized inputs always produce a structurally valid consensus."""
    rng = random.Random(7)
    universe = [f"file_{idx}.py" for idx in range(12)]
    for _ in range(25):
        orderings = []
        for _ in range(rng.randint(1, 6)):
            items = rng.sample(universe, rng.randint(0, len(universe)))
            orderings.append({"items": items})
        for exclude in (False, True):
            consensus = calculate_consensus(orderings, {"exclude_outliers": exclude})
            result = validate_consensus(consensus, orderings)
            assert result.valid, result.errors

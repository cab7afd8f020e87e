"""Tests for consensus structural validation."""

from __future__ import annotations

from order_reconciliation.consensus import calculate_consensus, validate_consensus


def test_computed_consensus_is_valid() -> None:
    """A computed consensus always validates."""
    orderings = [{"items": ["a", "b"]}, {"items": ["b", "c"]}, {"items": []}]
    result = validate_consensus(calculate_consensus(orderings), orderings)
    assert result.valid
    assert result.errors == []


def test_non_sequence_consensus_is_reported() -> None:
    """Non-sequence consensus values fail with one message."""
    for bad in ("a,b", None, {"a": 0}):
        result = validate_consensus(bad, [{"items": ["a"]}])
        assert result.valid is False
        assert result.errors == ["Consensus must be an ordered sequence"]


def test_all_violations_are_accumulated() -> None:
    """Duplicate, missing and extra items are all reported."""
    result = validate_consensus(["a", "a", "x"], [{"items": ["a", "b"]}])
    assert result.valid is False
    assert len(result.errors) == 3
    assert "duplicate" in result.errors[0]
    assert result.errors[1] == "Consensus missing files: b"
    assert result.errors[2] == "Consensus has extra files: x"


def test_empty_consensus_for_no_orderings_is_valid() -> None:
    """An empty consensus is valid when nothing was ordered."""
    assert validate_consensus([], []).valid
    assert validate_consensus([], [{"items": []}]).valid


def test_malformed_sources_do_not_raise() -> None:
    """Bad source records are reported, not raised."""
    result = validate_consensus(["a"], [{"items": ["a"]}, 42])
    assert result.valid is False
    assert any("malformed" in error for error in result.errors)

    result = validate_consensus(["a"], None)
    assert result.valid is False
    assert result.to_dict()["valid"] is False


def test_source_with_non_mapping_metadata_is_reported() -> None:
    """A source whose metadata is not a mapping is reported as malformed."""
    for metadata in (5, ["x"], "notes"):
        result = validate_consensus(["a"], [{"items": ["a"], "metadata": metadata}])
        assert result.valid is False
        assert result.errors == ["Source ordering 0 is malformed: metadata must be a mapping", "Consensus has extra files: a"]

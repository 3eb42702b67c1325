"""Classification Result — immutable aggregate of one classification run.

Tests:
    - Overlapping equivalence sets raise InvalidPartitionError naming the overlap
    - Valid inputs are exposed unchanged through read-only attributes
    - Instances are frozen; inputs are copied into frozensets
    - equivalents_of / are_equivalent treat absent concepts as singleton classes
    - summary reports counts only
"""

import dataclasses

import pytest

from termlogic.core.classification_result import (
    ClassificationResult, classification_result_from_sets,
)
from termlogic.core.errors import InvalidPartitionError


def test_overlapping_sets_are_rejected():
    with pytest.raises(InvalidPartitionError) as exc:
        ClassificationResult(
            affected_concepts={1, 2, 3},
            equivalent_sets=[{1, 2}, {2, 3}],
        )
    assert exc.value.shared_concepts == frozenset({2})
    assert exc.value.code == "INVALID_PARTITION"
    assert not exc.value.retryable


def test_valid_result_exposes_inputs():
    result = ClassificationResult(
        affected_concepts={5, 6}, equivalent_sets=[{5, 6}], commit=None,
    )
    assert result.affected_concepts == frozenset({5, 6})
    assert result.equivalent_sets == frozenset({frozenset({5, 6})})
    assert result.commit is None
    assert not result.has_commit


def test_commit_is_stored_opaquely():
    commit = object()
    result = ClassificationResult(affected_concepts={1}, commit=commit)
    assert result.commit is commit
    assert result.has_commit


def test_result_is_frozen():
    result = ClassificationResult(affected_concepts={1})
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.affected_concepts = frozenset()


def test_inputs_are_copied():
    affected = {1, 2}
    inner = {1, 2}
    result = ClassificationResult(affected_concepts=affected, equivalent_sets=[inner])
    affected.add(99)
    inner.add(99)
    assert 99 not in result.affected_concepts
    assert result.equivalents_of(1) == frozenset({1, 2})


def test_empty_inner_sets_are_dropped():
    result = ClassificationResult(equivalent_sets=[set(), {7, 8}])
    assert result.equivalent_sets == frozenset({frozenset({7, 8})})


def test_equivalents_of_absent_concept_is_singleton():
    result = ClassificationResult(equivalent_sets=[{1, 2}])
    assert result.equivalents_of(3) == frozenset({3})
    assert result.are_equivalent(1, 2)
    assert result.are_equivalent(3, 3)
    assert not result.are_equivalent(1, 3)


def test_summary_reports_counts_only():
    result = ClassificationResult(
        affected_concepts={101, 202, 303}, equivalent_sets=[{101, 202}],
    )
    assert str(result) == (
        "ClassificationResult{affectedConcepts=3, equivalentSets=1}"
    )
    assert "101" not in result.summary()


def test_from_sets_accepts_generators():
    result = classification_result_from_sets(
        (c for c in [4, 5, 6]),
        [[4, 5], (c for c in [6])],
    )
    assert result.affected_concepts == frozenset({4, 5, 6})
    assert frozenset({6}) in result.equivalent_sets


def test_from_sets_validates_partition():
    with pytest.raises(InvalidPartitionError):
        classification_result_from_sets([1], [[1, 2], [2, 3], [3, 4]])


def test_empty_result_is_valid():
    result = ClassificationResult()
    assert result.affected_concepts == frozenset()
    assert result.equivalent_sets == frozenset()
    assert result.summary() == "ClassificationResult{affectedConcepts=0, equivalentSets=0}"

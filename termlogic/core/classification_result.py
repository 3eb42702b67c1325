"""Classification Result — immutable snapshot of one classification run.

Invariants:
    - Constructed once, atomically; frozen afterward (no mutation methods)
    - equivalent_sets is a partition fragment: inner sets are pairwise disjoint
    - A concept without equivalents appears in no inner set (absence = singleton class)
    - commit is None for dry-run / preview classifications
    - summary() reports counts only, never set contents

Design Decisions:
    - frozen dataclass + frozensets: safe to share read-only across threads
    - Overlapping sets raise InvalidPartitionError instead of being merged:
      an overlap means the classifier is wrong, repairing it would hide that
    - commit is opaque (object): produced by the commit service, only stored here
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from termlogic.core.domain_types import ConceptSequence
from termlogic.core.errors import ErrorContext, InvalidPartitionError

# Opaque reference to the transaction that persisted the run's effects
CommitRecord = object


@dataclass(frozen=True)
class ClassificationResult:
    """Affected concepts, equivalence classes and optional commit of one run."""

    affected_concepts: frozenset[ConceptSequence] = field(default_factory=frozenset)
    equivalent_sets: frozenset[frozenset[ConceptSequence]] = field(
        default_factory=frozenset,
    )
    commit: CommitRecord | None = None

    def __post_init__(self):
        affected = frozenset(self.affected_concepts)
        equivalent = frozenset(
            inner for inner in map(frozenset, self.equivalent_sets) if inner
        )
        _check_disjoint(equivalent)
        object.__setattr__(self, "affected_concepts", affected)
        object.__setattr__(self, "equivalent_sets", equivalent)

    @property
    def has_commit(self) -> bool:
        return self.commit is not None

    def equivalents_of(self, concept: ConceptSequence) -> frozenset[ConceptSequence]:
        """The concept's equivalence class; a singleton if none was recorded."""
        for inner in self.equivalent_sets:
            if concept in inner:
                return inner
        return frozenset({concept})

    def are_equivalent(self, a: ConceptSequence, b: ConceptSequence) -> bool:
        return a == b or b in self.equivalents_of(a)

    def summary(self) -> str:
        return (
            f"ClassificationResult{{affectedConcepts={len(self.affected_concepts)}, "
            f"equivalentSets={len(self.equivalent_sets)}}}"
        )

    def __str__(self) -> str:
        return self.summary()


def classification_result_from_sets(
    affected_concepts: Iterable[int],
    equivalent_sets: Iterable[Iterable[int]],
    commit: CommitRecord | None = None,
) -> ClassificationResult:
    """Assemble a validated result from whatever collections a classifier produced."""
    return ClassificationResult(
        affected_concepts=frozenset(
            ConceptSequence(c) for c in affected_concepts
        ),
        equivalent_sets=frozenset(
            frozenset(ConceptSequence(c) for c in inner)
            for inner in equivalent_sets
        ),
        commit=commit,
    )


def _check_disjoint(equivalent_sets: frozenset[frozenset[ConceptSequence]]) -> None:
    seen: set[ConceptSequence] = set()
    shared: set[ConceptSequence] = set()
    for inner in equivalent_sets:
        shared |= seen & inner
        seen |= inner
    if shared:
        raise InvalidPartitionError(
            frozenset(shared),
            ErrorContext(debug_info={"equivalent_set_count": len(equivalent_sets)}),
        )

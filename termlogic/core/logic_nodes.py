"""Logic Nodes — immutable expression trees over LogicNodeKind.

Invariants:
    - LogicNode is frozen; children is a tuple whose order is semantically significant
    - Structural equality: same kinds, same child order, same literal values
    - A node carries only the fields its kind uses; builders never set the others
    - expand_substitutions returns a new tree and never mutates its input

Design Decisions:
    - One node dataclass for all kinds instead of a class per kind: the kind enum
      already closes the variant set, and a flat record maps 1:1 onto XML elements
    - Builders as plain functions (and_, or_, role_some, ...): trees read like the
      expressions they encode
"""

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from uuid import UUID

from termlogic.core.domain_types import ConcreteDomainOperator, LogicNodeKind
from termlogic.core.errors import InvalidExpressionError

LiteralValue = bool | int | float | str | datetime


@dataclass(frozen=True)
class LogicNode:
    """A single node of a logic graph or query expression."""
    kind: LogicNodeKind
    children: tuple["LogicNode", ...] = ()
    concept: UUID | None = None
    assemblage: UUID | None = None
    operator: ConcreteDomainOperator | None = None
    value: LiteralValue | None = None
    field_spec: str | None = None
    deferred: bool = False


@dataclass(frozen=True)
class QueryDocument:
    """Rooted expression tree plus an optional document name."""
    root: LogicNode
    name: str | None = None


# ─── Builders ────────────────────────────────────────────────────

def root(*children: LogicNode) -> LogicNode:
    return LogicNode(LogicNodeKind.DEFINITION_ROOT, tuple(children))


def necessary_set(*children: LogicNode) -> LogicNode:
    return LogicNode(LogicNodeKind.NECESSARY_SET, tuple(children))


def sufficient_set(*children: LogicNode) -> LogicNode:
    return LogicNode(LogicNodeKind.SUFFICIENT_SET, tuple(children))


def and_(*children: LogicNode) -> LogicNode:
    return LogicNode(LogicNodeKind.AND, tuple(children))


def or_(*children: LogicNode) -> LogicNode:
    return LogicNode(LogicNodeKind.OR, tuple(children))


def disjoint_with(*children: LogicNode) -> LogicNode:
    return LogicNode(LogicNodeKind.DISJOINT_WITH, tuple(children))


def concept(concept_id: UUID) -> LogicNode:
    return LogicNode(LogicNodeKind.CONCEPT, concept=concept_id)


def role_some(role_type: UUID, restriction: LogicNode) -> LogicNode:
    return LogicNode(
        LogicNodeKind.ROLE_SOME, (restriction,), concept=role_type,
    )


def role_all(role_type: UUID, restriction: LogicNode) -> LogicNode:
    return LogicNode(
        LogicNodeKind.ROLE_ALL, (restriction,), concept=role_type,
    )


def feature(
    feature_type: UUID, operator: ConcreteDomainOperator, literal: LogicNode,
) -> LogicNode:
    return LogicNode(
        LogicNodeKind.FEATURE, (literal,),
        concept=feature_type, operator=operator,
    )


def literal_boolean(value: bool) -> LogicNode:
    return LogicNode(LogicNodeKind.LITERAL_BOOLEAN, value=value)


def literal_float(value: float) -> LogicNode:
    return LogicNode(LogicNodeKind.LITERAL_FLOAT, value=value)


def literal_instant(value: datetime) -> LogicNode:
    return LogicNode(LogicNodeKind.LITERAL_INSTANT, value=value)


def literal_integer(value: int) -> LogicNode:
    return LogicNode(LogicNodeKind.LITERAL_INTEGER, value=value)


def literal_string(value: str) -> LogicNode:
    return LogicNode(LogicNodeKind.LITERAL_STRING, value=value)


def substitution(
    kind: LogicNodeKind, field_spec: str, deferred: bool = False,
) -> LogicNode:
    if not kind.is_substitution:
        raise ValueError(f"{kind.name} is not a substitution kind")
    return LogicNode(kind, field_spec=field_spec, deferred=deferred)


def template(template_concept: UUID, assemblage: UUID) -> LogicNode:
    return LogicNode(
        LogicNodeKind.TEMPLATE, concept=template_concept, assemblage=assemblage,
    )


# ─── Traversal ───────────────────────────────────────────────────

def walk(node: LogicNode, path: str = "root") -> Iterator[tuple[str, LogicNode]]:
    """Pre-order (path, node) pairs; child paths append their index."""
    yield path, node
    for i, child in enumerate(node.children):
        yield from walk(child, f"{path}/{i}")


def literal_value_matches(kind: LogicNodeKind, value: object) -> bool:
    """True if value has the Python type the literal kind declares.

    bool is rejected for integer/float literals; int is accepted for float,
    NaN is not (it would break structural equality). Instants must be
    timezone-aware.
    """
    expected = kind.literal_type
    if expected is None or value is None:
        return False
    if expected is bool:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if expected is float:
        return isinstance(value, (int, float)) and not math.isnan(value)
    if expected is datetime:
        return isinstance(value, datetime) and value.tzinfo is not None
    return isinstance(value, expected)


# ─── Substitution expansion ─────────────────────────────────────

def expand_substitutions(
    document: QueryDocument, bindings: Mapping[str, LiteralValue | UUID],
) -> QueryDocument:
    """Replace bound substitution placeholders with concrete nodes.

    Unbound placeholders are left as they are; serialization will reject them
    unless they are marked deferred.
    """
    return replace(
        document, root=_expand(document.root, bindings, "root"),
    )


def _expand(
    node: LogicNode, bindings: Mapping[str, LiteralValue | UUID], path: str,
) -> LogicNode:
    if node.kind.is_substitution:
        if node.field_spec is None or node.field_spec not in bindings:
            return node
        return _bind(node, bindings[node.field_spec], path)
    if not node.children:
        return node
    children = tuple(
        _expand(child, bindings, f"{path}/{i}")
        for i, child in enumerate(node.children)
    )
    return replace(node, children=children)


def _bind(node: LogicNode, bound: LiteralValue | UUID, path: str) -> LogicNode:
    target = node.kind.expansion_kind
    if target is LogicNodeKind.CONCEPT:
        if not isinstance(bound, UUID):
            raise InvalidExpressionError(
                f"Binding for '{node.field_spec}' must be a concept UUID", path,
            )
        return concept(bound)
    if not literal_value_matches(node.kind, bound):
        raise InvalidExpressionError(
            f"Binding for '{node.field_spec}' is not a valid "
            f"{node.kind.literal_type.__name__}",
            path,
        )
    if target is LogicNodeKind.LITERAL_FLOAT:
        bound = float(bound)
    return LogicNode(target, value=bound)

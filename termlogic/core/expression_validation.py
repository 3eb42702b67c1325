"""Expression Validation — structural rules every serializable tree must satisfy.

Invariants:
    - validate_document is all-or-nothing: it raises on the first violation and
      has no side effects, so serialization can run it before emitting any text
    - Every violation is an InvalidExpressionError carrying the node path (root/0/1)
    - Substitution placeholders pass only when explicitly deferred
    - Trees are acyclic and bounded by max_depth
    - Every emitted string (literal values, field specs, the document name) is
      XML 1.0 character data, so serialized text always parses back

Design Decisions:
    - Rules keyed by NodeCategory / kind in small helpers (one concern each)
      rather than a per-class validate() method: nodes stay plain records
"""

import re

from termlogic.core.domain_types import LogicNodeKind, NodeCategory
from termlogic.core.errors import ErrorContext, InvalidExpressionError
from termlogic.core.logic_nodes import LogicNode, QueryDocument, literal_value_matches

DEFAULT_MAX_DEPTH = 256

# Anything outside the XML 1.0 Char production, lone surrogates included
_NON_XML_CHAR = re.compile(
    r"[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


def validate_document(document: QueryDocument, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    if not isinstance(document.root, LogicNode):
        raise InvalidExpressionError("Document has no root node", "root")
    if document.name is not None:
        _check_text(document.name, "document name", "root")
    _validate(document.root, "root", frozenset(), max_depth)


def _validate(
    node: LogicNode, path: str, ancestors: frozenset[int], max_depth: int,
) -> None:
    if id(node) in ancestors:
        raise InvalidExpressionError("Node is its own ancestor", path)
    if len(ancestors) >= max_depth:
        raise InvalidExpressionError(
            f"Expression deeper than {max_depth} levels", path,
        )
    _check_node(node, path)
    inner = ancestors | {id(node)}
    for i, child in enumerate(node.children):
        if not isinstance(child, LogicNode):
            raise InvalidExpressionError("Child is not a logic node", f"{path}/{i}")
        _validate(child, f"{path}/{i}", inner, max_depth)


def _check_node(node: LogicNode, path: str) -> None:
    kind = node.kind
    if not isinstance(kind, LogicNodeKind):
        raise InvalidExpressionError(f"Unknown node kind {kind!r}", path)
    if kind.category is NodeCategory.SET_OPERATOR:
        _check_connector(node, path)
    elif kind.is_literal:
        _check_literal(node, path)
    elif kind.is_substitution:
        _check_substitution(node, path)
    elif kind is LogicNodeKind.TEMPLATE:
        _check_template(node, path)
    elif kind is LogicNodeKind.CONCEPT:
        _require_leaf(node, path)
        _require_concept(node, path)
    else:
        _check_relation(node, path)


def _context(node: LogicNode) -> ErrorContext:
    return ErrorContext(node_kind=node.kind.name)


def _check_text(
    text: str, what: str, path: str, context: ErrorContext | None = None,
) -> None:
    bad = _NON_XML_CHAR.search(text)
    if bad:
        raise InvalidExpressionError(
            f"{what.capitalize()} contains U+{ord(bad.group()):04X}, "
            "which XML cannot carry",
            path, context,
        )


def _require_leaf(node: LogicNode, path: str) -> None:
    if node.children:
        raise InvalidExpressionError(
            f"{node.kind.name} node cannot have children", path, _context(node),
        )


def _require_concept(node: LogicNode, path: str) -> None:
    if node.concept is None:
        raise InvalidExpressionError(
            f"{node.kind.name} node requires a concept", path, _context(node),
        )


def _check_connector(node: LogicNode, path: str) -> None:
    if node.kind is LogicNodeKind.DEFINITION_ROOT:
        return
    if not node.children:
        raise InvalidExpressionError(
            f"{node.kind.name} node requires at least one child", path, _context(node),
        )


def _check_literal(node: LogicNode, path: str) -> None:
    _require_leaf(node, path)
    if node.value is None:
        raise InvalidExpressionError(
            f"{node.kind.name} node has no value", path, _context(node),
        )
    if not literal_value_matches(node.kind, node.value):
        raise InvalidExpressionError(
            f"{node.kind.name} value {node.value!r} is not a valid "
            f"{node.kind.literal_type.__name__}",
            path, _context(node),
        )
    if isinstance(node.value, str):
        _check_text(node.value, "value", path, _context(node))


def _check_substitution(node: LogicNode, path: str) -> None:
    _require_leaf(node, path)
    if not node.field_spec:
        raise InvalidExpressionError(
            f"{node.kind.name} node has no field specification", path, _context(node),
        )
    _check_text(node.field_spec, "field specification", path, _context(node))
    if not node.deferred:
        raise InvalidExpressionError(
            f"Unresolved substitution '{node.field_spec}' is not marked deferred",
            path, _context(node),
        )


def _check_template(node: LogicNode, path: str) -> None:
    _require_leaf(node, path)
    _require_concept(node, path)
    if node.assemblage is None:
        raise InvalidExpressionError(
            "TEMPLATE node requires an assemblage", path, _context(node),
        )


def _check_relation(node: LogicNode, path: str) -> None:
    """ROLE_ALL, ROLE_SOME and FEATURE: typed, exactly one child."""
    _require_concept(node, path)
    if len(node.children) != 1:
        raise InvalidExpressionError(
            f"{node.kind.name} node requires exactly one child", path, _context(node),
        )
    if node.kind is not LogicNodeKind.FEATURE:
        return
    if node.operator is None:
        raise InvalidExpressionError(
            "FEATURE node requires an operator", path, _context(node),
        )
    if node.children[0].kind.literal_type is None:
        raise InvalidExpressionError(
            "FEATURE child must be a literal or literal substitution",
            f"{path}/0", _context(node),
        )

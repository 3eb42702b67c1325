"""Expression Mapping — QueryDocument <-> element tree, no text involved.

Invariants:
    - document_from_element accepts ONLY an already-parsed Element; text, bytes
      and streams raise TypeError, so the hardened parse cannot be skipped
    - One element per node, children in original order
    - Element tag = LogicNodeKind value; attributes carry the node's fields
    - Unknown tags, unknown attributes, stray text and ill-typed values raise
      MalformedDocumentError
    - Nesting beyond max_depth is rejected before the subtree is mapped

Design Decisions:
    - Mapping is pure and lives in core; parsing and rendering text live in
      infrastructure/hardened_xml.py (two-phase pipeline)
    - Strict attribute sets per kind: a typo in input fails loudly instead of
      silently dropping data
"""

from uuid import UUID
from xml.etree.ElementTree import Element, SubElement

from termlogic.core.domain_types import ConcreteDomainOperator, LogicNodeKind, NodeCategory
from termlogic.core.errors import ErrorContext, MalformedDocumentError
from termlogic.core.expression_validation import DEFAULT_MAX_DEPTH
from termlogic.core.literal_codec import format_literal, parse_literal
from termlogic.core.logic_nodes import LogicNode, QueryDocument

DOCUMENT_TAG = "logicDocument"
FORMAT_VERSION = "1"

_RELATION_ATTRS: dict[LogicNodeKind, frozenset[str]] = {
    LogicNodeKind.CONCEPT: frozenset({"concept"}),
    LogicNodeKind.ROLE_ALL: frozenset({"concept"}),
    LogicNodeKind.ROLE_SOME: frozenset({"concept"}),
    LogicNodeKind.FEATURE: frozenset({"concept", "operator"}),
    LogicNodeKind.TEMPLATE: frozenset({"concept", "assemblage"}),
}


def _allowed_attributes(kind: LogicNodeKind) -> frozenset[str]:
    if kind.category is NodeCategory.SET_OPERATOR:
        return frozenset()
    if kind.is_literal:
        return frozenset({"value"})
    if kind.is_substitution:
        return frozenset({"fieldSpec", "deferred"})
    return _RELATION_ATTRS[kind]


# ─── Document -> Element ─────────────────────────────────────────

def document_to_element(document: QueryDocument) -> Element:
    """Map a (validated) document to an element tree."""
    attrs = {"version": FORMAT_VERSION}
    if document.name is not None:
        attrs["name"] = document.name
    element = Element(DOCUMENT_TAG, attrs)
    _append_node(element, document.root)
    return element


def _append_node(parent: Element, node: LogicNode) -> None:
    element = SubElement(parent, node.kind.value, _node_attributes(node))
    for child in node.children:
        _append_node(element, child)


def _node_attributes(node: LogicNode) -> dict[str, str]:
    attrs: dict[str, str] = {}
    if node.concept is not None:
        attrs["concept"] = str(node.concept)
    if node.assemblage is not None:
        attrs["assemblage"] = str(node.assemblage)
    if node.operator is not None:
        attrs["operator"] = node.operator.value
    if node.kind.is_literal:
        attrs["value"] = format_literal(node.kind, node.value)
    if node.field_spec is not None:
        attrs["fieldSpec"] = node.field_spec
    if node.deferred:
        attrs["deferred"] = "true"
    return attrs


# ─── Element -> Document ─────────────────────────────────────────

def document_from_element(
    element: Element, max_depth: int = DEFAULT_MAX_DEPTH,
) -> QueryDocument:
    """Map an already-parsed element tree to a QueryDocument.

    Nesting is bounded while mapping, so hostile depth never reaches the
    recursive steps that follow.
    """
    if not isinstance(element, Element):
        raise TypeError(
            "document_from_element requires a parsed Element; "
            f"got {type(element).__name__}. Parse text with parse_hardened() first."
        )
    if element.tag != DOCUMENT_TAG:
        raise MalformedDocumentError(
            f"Root element must be <{DOCUMENT_TAG}>, got <{element.tag}>",
        )
    version = element.get("version")
    if version != FORMAT_VERSION:
        raise MalformedDocumentError(f"Unsupported document version {version!r}")
    unknown = set(element.attrib) - {"version", "name"}
    if unknown:
        raise MalformedDocumentError(
            f"Unknown document attributes: {', '.join(sorted(unknown))}",
        )
    _reject_text(element, "document")
    children = list(element)
    if len(children) != 1:
        raise MalformedDocumentError(
            f"Document must hold exactly one root node, found {len(children)}",
        )
    return QueryDocument(
        root=_node_from_element(children[0], "root", 0, max_depth),
        name=element.get("name"),
    )


def _node_from_element(
    element: Element, path: str, depth: int, max_depth: int,
) -> LogicNode:
    if depth >= max_depth:
        raise MalformedDocumentError(
            f"Document nests deeper than {max_depth} levels",
            ErrorContext(node_path=path),
        )
    try:
        kind = LogicNodeKind(element.tag)
    except ValueError:
        raise MalformedDocumentError(
            f"Unknown node element <{element.tag}>", ErrorContext(node_path=path),
        ) from None
    attrs = dict(element.attrib)
    unknown = set(attrs) - _allowed_attributes(kind)
    if unknown:
        raise MalformedDocumentError(
            f"<{element.tag}> has unknown attributes: {', '.join(sorted(unknown))}",
            ErrorContext(node_kind=kind.name, node_path=path),
        )
    _reject_text(element, path)
    children = tuple(
        _node_from_element(child, f"{path}/{i}", depth + 1, max_depth)
        for i, child in enumerate(element)
    )
    try:
        return LogicNode(
            kind,
            children,
            concept=_uuid_attr(attrs, "concept"),
            assemblage=_uuid_attr(attrs, "assemblage"),
            operator=_operator_attr(attrs),
            value=_value_attr(kind, attrs),
            field_spec=attrs.get("fieldSpec"),
            deferred=_deferred_attr(attrs),
        )
    except ValueError as e:
        raise MalformedDocumentError(
            f"<{element.tag}> has an invalid attribute: {e}",
            ErrorContext(node_kind=kind.name, node_path=path),
        ) from e


def _reject_text(element: Element, path: str) -> None:
    for child in element:
        if child.tail and child.tail.strip():
            raise MalformedDocumentError(
                "Unexpected text between elements", ErrorContext(node_path=path),
            )
    if element.text and element.text.strip():
        raise MalformedDocumentError(
            f"Unexpected text content in <{element.tag}>", ErrorContext(node_path=path),
        )


def _uuid_attr(attrs: dict[str, str], name: str) -> UUID | None:
    raw = attrs.get(name)
    return UUID(raw) if raw is not None else None


def _operator_attr(attrs: dict[str, str]) -> ConcreteDomainOperator | None:
    raw = attrs.get("operator")
    return ConcreteDomainOperator(raw) if raw is not None else None


def _value_attr(kind: LogicNodeKind, attrs: dict[str, str]) -> object:
    raw = attrs.get("value")
    if raw is None:
        return None
    return parse_literal(kind, raw)


def _deferred_attr(attrs: dict[str, str]) -> bool:
    raw = attrs.get("deferred", "false")
    if raw not in ("true", "false"):
        raise ValueError(f"deferred must be 'true' or 'false', got {raw!r}")
    return raw == "true"

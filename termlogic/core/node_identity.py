"""Node Identity — deterministic 128-bit identifiers for node kinds and nodes.

Invariants:
    - stable_id(kind) = uuid5(SEMANTIC_NAMESPACE, QUALIFIED_KIND_PREFIX + kind.name)
    - The namespace and the qualified prefix are a fixed wire format shared with
      persisted data; changing either orphans every stored handle
    - stable_id is pure and total: no IO, never raises
    - node_uuid is content-derived: structurally equal trees share node uuids,
      and child order changes the uuid of connectors

Design Decisions:
    - RFC 4122 name-based SHA-1 (uuid.uuid5): the standard-library generator is
      byte-for-byte compatible with every other v5 implementation
    - Per-kind ids precomputed once at import; the kind set is closed
"""

from uuid import UUID, uuid5

from termlogic.core.domain_types import (
    LogicNodeKind, NodeCategory, NodeUuid, StableId,
)
from termlogic.core.literal_codec import format_literal
from termlogic.core.logic_nodes import LogicNode

SEMANTIC_NAMESPACE = UUID("8a834ec8-028d-11e5-a322-1697f925ec7b")

# Fully qualified enum class name of the system that first minted these ids
QUALIFIED_KIND_PREFIX = "gov.vha.isaac.ochre.api.logic.NodeSemantic"


def canonical_name(kind: LogicNodeKind) -> str:
    """Name string hashed under SEMANTIC_NAMESPACE for a kind."""
    return QUALIFIED_KIND_PREFIX + kind.name


_STABLE_IDS: dict[LogicNodeKind, StableId] = {
    kind: StableId(uuid5(SEMANTIC_NAMESPACE, canonical_name(kind)))
    for kind in LogicNodeKind
}
_KINDS_BY_ID: dict[UUID, LogicNodeKind] = {
    uid: kind for kind, uid in _STABLE_IDS.items()
}


def stable_id(kind: LogicNodeKind) -> StableId:
    return _STABLE_IDS[kind]


def all_stable_ids() -> dict[LogicNodeKind, StableId]:
    return dict(_STABLE_IDS)


def kind_for_stable_id(identifier: UUID) -> LogicNodeKind | None:
    """Reverse lookup; None for identifiers that name no kind."""
    return _KINDS_BY_ID.get(identifier)


# ─── Per-node content identifiers ────────────────────────────────

def node_uuid(node: LogicNode) -> NodeUuid:
    """Content-derived identifier for a node and its subtree.

    Seeded by the kind's stable id; the name part is the node's own content
    followed by its children's uuids in order.
    """
    kind = node.kind
    if kind is LogicNodeKind.DEFINITION_ROOT:
        return NodeUuid(stable_id(kind))
    return NodeUuid(uuid5(stable_id(kind), _seed(node)))


def _seed(node: LogicNode) -> str:
    kind = node.kind
    child_part = "".join(str(node_uuid(child)) for child in node.children)
    if kind.category is NodeCategory.SET_OPERATOR:
        return child_part
    if kind.category is NodeCategory.LITERAL:
        return format_literal(kind, node.value)
    if kind.is_substitution:
        return node.field_spec or ""
    if kind is LogicNodeKind.TEMPLATE:
        return f"{node.concept}{node.assemblage}"
    if kind is LogicNodeKind.FEATURE:
        operator = node.operator.name if node.operator else ""
        return f"{node.concept}{operator}{child_part}"
    # CONCEPT and roles
    return f"{node.concept}{child_part}"

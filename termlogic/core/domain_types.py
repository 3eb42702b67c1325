"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - LogicNodeKind is closed: 22 members, declaration order fixed
    - Every kind belongs to exactly one NodeCategory
    - Enum values double as XML element names (wire format, never renamed)
    - Identity NewTypes wrap UUID / int — never use bare values in domain logic

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and XML without custom encoders
    - Category is a lookup table, not a member attribute: the enum stays a pure
      closed set with no per-member mutable state
"""

from datetime import datetime
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

StableId = NewType("StableId", UUID)            # namespace-derived, per kind
NodeUuid = NewType("NodeUuid", UUID)            # content-derived, per node
NodeHandle = NewType("NodeHandle", int)         # process-local, from lookup service
ConceptSequence = NewType("ConceptSequence", int)


# ─── Enums ───────────────────────────────────────────────────────

class NodeCategory(str, Enum):
    """Partition of LogicNodeKind."""
    SET_OPERATOR = "set_operator"
    RELATIONAL = "relational"
    LITERAL = "literal"
    SUBSTITUTION = "substitution"


class LogicNodeKind(str, Enum):
    """Description-logic construct carried by a node of an expression tree."""
    NECESSARY_SET = "necessarySet"
    SUFFICIENT_SET = "sufficientSet"
    AND = "and"
    OR = "or"
    DISJOINT_WITH = "disjointWith"
    DEFINITION_ROOT = "definitionRoot"

    ROLE_ALL = "roleAll"
    ROLE_SOME = "roleSome"
    CONCEPT = "concept"
    FEATURE = "feature"

    LITERAL_BOOLEAN = "literalBoolean"
    LITERAL_FLOAT = "literalFloat"
    LITERAL_INSTANT = "literalInstant"
    LITERAL_INTEGER = "literalInteger"
    LITERAL_STRING = "literalString"

    TEMPLATE = "template"
    SUBSTITUTION_CONCEPT = "substitutionConcept"
    SUBSTITUTION_BOOLEAN = "substitutionBoolean"
    SUBSTITUTION_FLOAT = "substitutionFloat"
    SUBSTITUTION_INSTANT = "substitutionInstant"
    SUBSTITUTION_INTEGER = "substitutionInteger"
    SUBSTITUTION_STRING = "substitutionString"

    @property
    def category(self) -> NodeCategory:
        return _CATEGORIES[self]

    @property
    def is_connector(self) -> bool:
        return self.category is NodeCategory.SET_OPERATOR

    @property
    def is_literal(self) -> bool:
        return self.category is NodeCategory.LITERAL

    @property
    def is_substitution(self) -> bool:
        """Placeholder kinds that must be expanded or deferred before output."""
        return self in _SUBSTITUTION_TARGETS

    @property
    def is_role(self) -> bool:
        return self in (LogicNodeKind.ROLE_ALL, LogicNodeKind.ROLE_SOME)

    @property
    def literal_type(self) -> type | None:
        """Python type of the value a literal (or literal substitution) carries."""
        return _LITERAL_TYPES.get(self)

    @property
    def expansion_kind(self) -> "LogicNodeKind | None":
        """Kind a substitution node becomes once its placeholder is bound."""
        return _SUBSTITUTION_TARGETS.get(self)


class ConcreteDomainOperator(str, Enum):
    """Comparison applied by a FEATURE node to its literal child."""
    EQUALS = "equals"
    LESS_THAN = "lessThan"
    LESS_THAN_OR_EQUALS = "lessThanOrEquals"
    GREATER_THAN = "greaterThan"
    GREATER_THAN_OR_EQUALS = "greaterThanOrEquals"


_K = LogicNodeKind

_CATEGORIES: dict[LogicNodeKind, NodeCategory] = {
    **dict.fromkeys(
        (_K.NECESSARY_SET, _K.SUFFICIENT_SET, _K.AND, _K.OR,
         _K.DISJOINT_WITH, _K.DEFINITION_ROOT),
        NodeCategory.SET_OPERATOR,
    ),
    **dict.fromkeys(
        (_K.ROLE_ALL, _K.ROLE_SOME, _K.CONCEPT, _K.FEATURE),
        NodeCategory.RELATIONAL,
    ),
    **dict.fromkeys(
        (_K.LITERAL_BOOLEAN, _K.LITERAL_FLOAT, _K.LITERAL_INSTANT,
         _K.LITERAL_INTEGER, _K.LITERAL_STRING),
        NodeCategory.LITERAL,
    ),
    **dict.fromkeys(
        (_K.TEMPLATE, _K.SUBSTITUTION_CONCEPT, _K.SUBSTITUTION_BOOLEAN,
         _K.SUBSTITUTION_FLOAT, _K.SUBSTITUTION_INSTANT,
         _K.SUBSTITUTION_INTEGER, _K.SUBSTITUTION_STRING),
        NodeCategory.SUBSTITUTION,
    ),
}

# TEMPLATE sits in the substitution category but is not a placeholder
_SUBSTITUTION_TARGETS: dict[LogicNodeKind, LogicNodeKind] = {
    _K.SUBSTITUTION_CONCEPT: _K.CONCEPT,
    _K.SUBSTITUTION_BOOLEAN: _K.LITERAL_BOOLEAN,
    _K.SUBSTITUTION_FLOAT: _K.LITERAL_FLOAT,
    _K.SUBSTITUTION_INSTANT: _K.LITERAL_INSTANT,
    _K.SUBSTITUTION_INTEGER: _K.LITERAL_INTEGER,
    _K.SUBSTITUTION_STRING: _K.LITERAL_STRING,
}

_LITERAL_TYPES: dict[LogicNodeKind, type] = {
    _K.LITERAL_BOOLEAN: bool,
    _K.LITERAL_FLOAT: float,
    _K.LITERAL_INSTANT: datetime,
    _K.LITERAL_INTEGER: int,
    _K.LITERAL_STRING: str,
    _K.SUBSTITUTION_BOOLEAN: bool,
    _K.SUBSTITUTION_FLOAT: float,
    _K.SUBSTITUTION_INSTANT: datetime,
    _K.SUBSTITUTION_INTEGER: int,
    _K.SUBSTITUTION_STRING: str,
}

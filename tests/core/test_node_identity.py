"""Node Identity — stable ids per kind and content-derived ids per node.

Tests:
    - stable_id follows uuid5(namespace, qualified prefix + kind name)
    - No two kinds collide; ids are version-5 uuids
    - Repeated calls are identical (pure); reverse lookup round-trips
    - node_uuid is deterministic, content-sensitive and order-sensitive
"""

from uuid import UUID, uuid5

from termlogic.core.domain_types import ConcreteDomainOperator, LogicNodeKind
from termlogic.core.logic_nodes import (
    and_, concept, feature, literal_float, literal_integer, or_, role_some,
    root, substitution, template,
)
from termlogic.core.node_identity import (
    QUALIFIED_KIND_PREFIX, SEMANTIC_NAMESPACE, all_stable_ids, canonical_name,
    kind_for_stable_id, node_uuid, stable_id,
)

X = UUID("11111111-1111-1111-1111-111111111111")
Y = UUID("22222222-2222-2222-2222-222222222222")
R = UUID("33333333-3333-3333-3333-333333333333")


def test_namespace_is_fixed():
    assert SEMANTIC_NAMESPACE == UUID("8a834ec8-028d-11e5-a322-1697f925ec7b")


def test_canonical_name_concatenates_prefix_and_variant():
    assert canonical_name(LogicNodeKind.NECESSARY_SET) == (
        "gov.vha.isaac.ochre.api.logic.NodeSemanticNECESSARY_SET"
    )
    assert QUALIFIED_KIND_PREFIX == "gov.vha.isaac.ochre.api.logic.NodeSemantic"


def test_stable_id_is_name_based_sha1():
    for kind in LogicNodeKind:
        expected = uuid5(SEMANTIC_NAMESPACE, QUALIFIED_KIND_PREFIX + kind.name)
        assert stable_id(kind) == expected
        assert stable_id(kind).version == 5


def test_stable_ids_never_collide():
    ids = list(all_stable_ids().values())
    assert len(ids) == 22
    assert len(set(ids)) == 22


def test_stable_id_is_repeatable():
    assert stable_id(LogicNodeKind.AND) == stable_id(LogicNodeKind.AND)
    assert all_stable_ids() == all_stable_ids()


def test_all_stable_ids_returns_a_copy():
    ids = all_stable_ids()
    ids.clear()
    assert len(all_stable_ids()) == 22


def test_reverse_lookup():
    for kind, identifier in all_stable_ids().items():
        assert kind_for_stable_id(identifier) is kind
    assert kind_for_stable_id(X) is None


def test_root_node_uuid_is_kind_stable_id():
    assert node_uuid(root(and_(concept(X)))) == stable_id(LogicNodeKind.DEFINITION_ROOT)


def test_structurally_equal_trees_share_node_uuid():
    a = and_(concept(X), role_some(R, concept(Y)))
    b = and_(concept(X), role_some(R, concept(Y)))
    assert a is not b
    assert node_uuid(a) == node_uuid(b)


def test_child_order_changes_connector_uuid():
    assert node_uuid(and_(concept(X), concept(Y))) != node_uuid(
        and_(concept(Y), concept(X))
    )


def test_kind_changes_uuid_for_same_content():
    assert node_uuid(and_(concept(X))) != node_uuid(or_(concept(X)))


def test_concept_uuid_is_seeded_by_concept_id():
    expected = uuid5(stable_id(LogicNodeKind.CONCEPT), str(X))
    assert node_uuid(concept(X)) == expected


def test_literal_uuid_uses_canonical_text():
    expected = uuid5(stable_id(LogicNodeKind.LITERAL_INTEGER), "42")
    assert node_uuid(literal_integer(42)) == expected
    assert node_uuid(literal_float(1.5)) == uuid5(
        stable_id(LogicNodeKind.LITERAL_FLOAT), "1.5",
    )


def test_feature_uuid_depends_on_operator():
    eq = feature(R, ConcreteDomainOperator.EQUALS, literal_integer(3))
    lt = feature(R, ConcreteDomainOperator.LESS_THAN, literal_integer(3))
    assert node_uuid(eq) != node_uuid(lt)


def test_substitution_and_template_uuids():
    sub = substitution(LogicNodeKind.SUBSTITUTION_INTEGER, "dose", deferred=True)
    assert node_uuid(sub) == uuid5(
        stable_id(LogicNodeKind.SUBSTITUTION_INTEGER), "dose",
    )
    assert node_uuid(template(X, Y)) == uuid5(
        stable_id(LogicNodeKind.TEMPLATE), f"{X}{Y}",
    )

"""Expression Serializer — secure, deterministic XML round trips.

Tests:
    - Round trip preserves structure and child order
    - DOCTYPE, entity bombs and external entities are refused before expansion
    - Truncated / non-XML input is malformed
    - Invalid trees produce no output; deferred substitutions serialize
    - Output is deterministic and starts with the XML declaration
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from termlogic.core.domain_types import ConcreteDomainOperator, LogicNodeKind
from termlogic.core.errors import InvalidExpressionError, MalformedDocumentError
from termlogic.core.logic_nodes import (
    LogicNode, QueryDocument, and_, concept, feature, literal_boolean,
    literal_instant, literal_integer, literal_string, necessary_set, or_,
    role_some, root, substitution, template,
)
from termlogic.services.expression_serializer import (
    ExpressionSerializer, deserialize_document, serialize_document,
)

X = UUID("11111111-1111-1111-1111-111111111111")
Y = UUID("22222222-2222-2222-2222-222222222222")
R = UUID("33333333-3333-3333-3333-333333333333")


@pytest.fixture
def serializer():
    return ExpressionSerializer()


def test_round_trip_preserves_order(serializer):
    doc = QueryDocument(and_(concept(X), role_some(R, concept(Y))))
    text = serializer.serialize(doc)
    restored = serializer.deserialize(text)
    assert restored == doc
    assert restored.root.children[0] == concept(X)
    assert restored.root.children[1].children[0] == concept(Y)


def test_round_trip_of_every_literal_and_placeholder(serializer):
    doc = QueryDocument(
        root(necessary_set(or_(
            literal_boolean(False),
            literal_integer(-42),
            literal_string("héllo <world> & \"quotes\""),
            literal_instant(datetime(2024, 2, 29, 12, 30, tzinfo=timezone(timedelta(hours=2)))),
            feature(R, ConcreteDomainOperator.GREATER_THAN_OR_EQUALS,
                    LogicNode(LogicNodeKind.LITERAL_FLOAT, value=0.1)),
            template(X, Y),
            substitution(LogicNodeKind.SUBSTITUTION_INSTANT, "when", deferred=True),
        ))),
        name="all kinds",
    )
    assert serializer.deserialize(serializer.serialize(doc)) == doc


def test_output_is_deterministic(serializer):
    doc = QueryDocument(and_(concept(X), literal_integer(1)), name="q")
    first = serializer.serialize(doc)
    assert first == serializer.serialize(doc)
    assert first.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<logicDocument')
    assert '  <and>' in first


def test_indent_is_configurable():
    text = ExpressionSerializer(indent=4).serialize(QueryDocument(and_(concept(X))))
    assert "\n    <and>" in text


def test_doctype_with_external_entity_is_refused(serializer):
    payload = (
        '<?xml version="1.0"?>\n'
        '<!DOCTYPE logicDocument [<!ENTITY xxe SYSTEM "file:///etc/passwd">]>\n'
        '<logicDocument version="1"><literalString value="&xxe;"/></logicDocument>'
    )
    with pytest.raises(MalformedDocumentError):
        serializer.deserialize(payload)


def test_remote_dtd_is_refused(serializer):
    payload = (
        '<!DOCTYPE logicDocument SYSTEM "http://attacker.invalid/evil.dtd">'
        '<logicDocument version="1"><and/></logicDocument>'
    )
    with pytest.raises(MalformedDocumentError):
        serializer.deserialize(payload)


def test_entity_expansion_bomb_is_refused(serializer):
    entities = "".join(
        f'<!ENTITY lol{i} "{("&lol" + str(i - 1) + ";") * 10}">' for i in range(1, 10)
    )
    payload = (
        f'<!DOCTYPE lolz [<!ENTITY lol0 "lol">{entities}]>'
        '<logicDocument version="1"><literalString value="&lol9;"/></logicDocument>'
    )
    with pytest.raises(MalformedDocumentError):
        serializer.deserialize(payload)


@pytest.mark.parametrize("payload", [
    '<logicDocument version="1"><and>',
    "not xml at all",
    "",
    '<logicDocument version="1"><literalInteger value="abc"/></logicDocument>',
    '<logicDocument version="1"><and/></logicDocument>',
    '<logicDocument version="1"><substitutionString fieldSpec="x"/></logicDocument>',
])
def test_bad_input_is_malformed(serializer, payload):
    with pytest.raises(MalformedDocumentError):
        serializer.deserialize(payload)


def test_oversized_input_is_refused_before_parsing():
    small = ExpressionSerializer(max_document_bytes=64)
    payload = '<logicDocument version="1">' + " " * 100 + "<and/></logicDocument>"
    with pytest.raises(MalformedDocumentError, match="exceeds"):
        small.deserialize(payload)


def test_literal_without_value_is_not_serialized(serializer):
    doc = QueryDocument(and_(concept(X), LogicNode(LogicNodeKind.LITERAL_INTEGER)))
    with pytest.raises(InvalidExpressionError) as exc:
        serializer.serialize(doc)
    assert exc.value.node_path == "root/1"


def test_unresolved_substitution_is_not_serialized(serializer):
    doc = QueryDocument(and_(substitution(LogicNodeKind.SUBSTITUTION_CONCEPT, "c")))
    with pytest.raises(InvalidExpressionError):
        serializer.serialize(doc)


def test_deferred_substitution_serializes(serializer):
    doc = QueryDocument(and_(
        substitution(LogicNodeKind.SUBSTITUTION_CONCEPT, "c", deferred=True),
    ))
    text = serializer.serialize(doc)
    assert 'fieldSpec="c"' in text
    assert 'deferred="true"' in text
    assert serializer.deserialize(text) == doc


def test_module_level_helpers_use_defaults():
    doc = QueryDocument(and_(concept(X)))
    assert deserialize_document(serialize_document(doc)) == doc


def test_bytes_input_is_accepted(serializer):
    doc = QueryDocument(and_(concept(X)))
    assert serializer.deserialize(serializer.serialize(doc).encode("utf-8")) == doc


def test_deep_nesting_is_malformed_not_a_crash(serializer):
    depth = 50_000
    payload = (
        '<logicDocument version="1">' + "<and>" * depth
        + f'<concept concept="{X}"/>' + "</and>" * depth + "</logicDocument>"
    )
    assert len(payload.encode("utf-8")) < serializer.max_document_bytes
    with pytest.raises(MalformedDocumentError, match="deeper than"):
        serializer.deserialize(payload)


def test_depth_limit_applies_to_input():
    shallow = ExpressionSerializer(max_depth=3)
    payload = (
        '<logicDocument version="1"><and><and><and>'
        f'<concept concept="{X}"/></and></and></and></logicDocument>'
    )
    with pytest.raises(MalformedDocumentError):
        shallow.deserialize(payload)


def test_unencodable_text_is_malformed(serializer):
    with pytest.raises(MalformedDocumentError):
        serializer.deserialize('<logicDocument version="1">\ud800</logicDocument>')


@pytest.mark.parametrize("text", ["a\x01b", "x\x00", "\ud800", "\ufffe"])
def test_non_xml_characters_are_not_serialized(serializer, text):
    doc = QueryDocument(root(feature(R, ConcreteDomainOperator.EQUALS, LogicNode(
        LogicNodeKind.LITERAL_STRING, value=text,
    ))))
    with pytest.raises(InvalidExpressionError):
        serializer.serialize(doc)


def test_non_xml_characters_in_name_and_field_spec(serializer):
    with pytest.raises(InvalidExpressionError):
        serializer.serialize(QueryDocument(and_(concept(X)), name="q\x07"))
    doc = QueryDocument(and_(
        substitution(LogicNodeKind.SUBSTITUTION_STRING, "f\x1b", deferred=True),
    ))
    with pytest.raises(InvalidExpressionError):
        serializer.serialize(doc)


def test_whitespace_and_astral_text_round_trips(serializer):
    doc = QueryDocument(
        and_(LogicNode(LogicNodeKind.LITERAL_STRING, value="tab\tline\ncr\r\U0001F600")),
        name="multi\nline",
    )
    assert serializer.deserialize(serializer.serialize(doc)) == doc


@pytest.mark.parametrize("value", ["1_000", " 1.5", "1.5 ", "infinity", "0x10"])
def test_loose_float_text_is_malformed(serializer, value):
    payload = (
        f'<logicDocument version="1"><feature concept="{R}" operator="equals">'
        f'<literalFloat value="{value}"/></feature></logicDocument>'
    )
    with pytest.raises(MalformedDocumentError):
        serializer.deserialize(payload)


def test_infinite_float_round_trips(serializer):
    doc = QueryDocument(feature(
        R, ConcreteDomainOperator.LESS_THAN,
        LogicNode(LogicNodeKind.LITERAL_FLOAT, value=float("-inf")),
    ))
    assert serializer.deserialize(serializer.serialize(doc)) == doc

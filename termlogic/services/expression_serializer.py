"""Expression Serializer — QueryDocument <-> XML text across process boundaries.

Invariants:
    - serialize validates the whole tree first; on InvalidExpressionError no text
      is produced
    - deserialize is strictly two-phase: parse_hardened(text) -> Element, then
      document_from_element(Element); raw text never reaches the mapping step
    - Any DOCTYPE in input -> MalformedDocumentError; nothing external is fetched
    - deserialize(serialize(d)) == d for every valid document d
    - Stateless beyond formatting config: one instance is safe across threads

Design Decisions:
    - Structural problems found in *input* are reported as MalformedDocumentError
      (the caller handed us bad text), while the same problems in a tree we are
      asked to emit are InvalidExpressionError (the caller built a bad tree)
    - Size limit checked before parsing: the parser never sees oversized input
    - Depth bounded during mapping, before the recursive validation pass
"""

import logging

from termlogic.core.errors import (
    ErrorContext, InvalidExpressionError, MalformedDocumentError,
)
from termlogic.core.expression_mapping import document_from_element, document_to_element
from termlogic.core.expression_validation import DEFAULT_MAX_DEPTH, validate_document
from termlogic.core.logic_nodes import QueryDocument
from termlogic.infrastructure.hardened_xml import parse_hardened, render_element

logger = logging.getLogger(__name__)

DEFAULT_MAX_DOCUMENT_BYTES = 1_048_576


class ExpressionSerializer:
    """Marshals expression documents to indented XML and back."""

    def __init__(
        self,
        indent: int = 2,
        max_document_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.indent = indent
        self.max_document_bytes = max_document_bytes
        self.max_depth = max_depth

    def serialize(self, document: QueryDocument) -> str:
        validate_document(document, self.max_depth)
        return render_element(document_to_element(document), self.indent)

    def deserialize(self, text: str | bytes) -> QueryDocument:
        raw = _encode(text)
        if len(raw) > self.max_document_bytes:
            raise MalformedDocumentError(
                f"Document exceeds {self.max_document_bytes} bytes",
            )
        element = parse_hardened(raw)
        document = document_from_element(element, self.max_depth)
        try:
            validate_document(document, self.max_depth)
        except InvalidExpressionError as e:
            raise MalformedDocumentError(
                f"Document describes an invalid expression: {e.message}",
                ErrorContext(node_path=e.node_path),
            ) from e
        logger.debug("Deserialized expression document")
        return document


def _encode(text: str | bytes) -> bytes:
    if not isinstance(text, str):
        return text
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise MalformedDocumentError(
            f"Document text is not encodable as UTF-8 at offset {e.start}",
        ) from e


_default = ExpressionSerializer()


def serialize_document(document: QueryDocument) -> str:
    return _default.serialize(document)


def deserialize_document(text: str | bytes) -> QueryDocument:
    return _default.deserialize(text)

"""Hardened XML — parse untrusted text into an element tree, render trees to text.

Invariants:
    - parse_hardened never expands entities and never fetches external resources
    - Any DOCTYPE declaration is rejected outright (MalformedDocumentError), not stripped
    - Truncated or invalid markup raises MalformedDocumentError
    - render_element is deterministic: fixed declaration, fixed indentation

Design Decisions:
    - defusedxml with forbid_dtd / forbid_entities / forbid_external: the parser
      refuses the declaration before any entity is defined, so neither
      entity-expansion bombs nor XXE payloads ever reach the tree builder
    - The output of parse_hardened is a plain stdlib Element; mapping to nodes
      happens in core/expression_mapping.py, which only accepts Elements
    - XML declaration written by hand: ElementTree derives it from the locale
      when asked for unicode output
"""

import logging
from xml.etree import ElementTree as ET

import defusedxml
from defusedxml.ElementTree import fromstring as _defused_fromstring

from termlogic.core.errors import MalformedDocumentError

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def parse_hardened(text: str | bytes) -> ET.Element:
    """Parse untrusted XML text with DTDs, entities and external refs forbidden."""
    if not isinstance(text, (str, bytes)):
        raise TypeError(f"parse_hardened expects str or bytes, got {type(text).__name__}")
    try:
        return _defused_fromstring(
            text, forbid_dtd=True, forbid_entities=True, forbid_external=True,
        )
    except defusedxml.DTDForbidden as e:
        logger.warning("Rejected document with DOCTYPE declaration")
        raise MalformedDocumentError(
            "Document type declarations are not allowed",
        ) from e
    except defusedxml.EntitiesForbidden as e:
        logger.warning("Rejected document declaring entities")
        raise MalformedDocumentError("Entity declarations are not allowed") from e
    except defusedxml.ExternalReferenceForbidden as e:
        logger.warning("Rejected document referencing external resources")
        raise MalformedDocumentError("External references are not allowed") from e
    except defusedxml.DefusedXmlException as e:
        raise MalformedDocumentError(f"Unsafe XML rejected: {e}") from e
    except ET.ParseError as e:
        raise MalformedDocumentError(f"Invalid XML: {e}") from e


def render_element(element: ET.Element, indent: int = 2) -> str:
    """Serialize an element tree to indented text with an XML declaration."""
    ET.indent(element, space=" " * indent)
    return XML_DECLARATION + ET.tostring(element, encoding="unicode") + "\n"

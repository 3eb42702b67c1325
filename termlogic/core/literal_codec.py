"""Literal Codec — canonical text form of literal values.

Invariants:
    - parse_literal(kind, format_literal(kind, v)) == v for every valid v
    - Booleans are "true" / "false"; floats use repr(); instants ISO-8601 with offset
    - parse_literal raises ValueError on any text the kind does not accept; numbers
      must be plain digits (no underscores, padding or spelled-out words)

Design Decisions:
    - One codec shared by node identity hashing and XML mapping, so the
      content-derived node uuid and the wire text can never disagree
"""

import re
from datetime import datetime

from termlogic.core.domain_types import LogicNodeKind

_INTEGER = re.compile(r"-?[0-9]+")
# Decimal and exponent forms plus the "inf" spelling repr() produces
_FLOAT = re.compile(r"-?(?:inf|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")


def format_literal(kind: LogicNodeKind, value: object) -> str:
    expected = kind.literal_type
    if expected is bool:
        return "true" if value else "false"
    if expected is float:
        return repr(float(value))
    if expected is datetime:
        return value.isoformat()
    return str(value)


def parse_literal(kind: LogicNodeKind, text: str) -> object:
    expected = kind.literal_type
    if expected is None:
        raise ValueError(f"{kind.name} carries no literal value")
    if expected is bool:
        if text not in ("true", "false"):
            raise ValueError(f"not a boolean: {text!r}")
        return text == "true"
    if expected is int:
        if not _INTEGER.fullmatch(text):
            raise ValueError(f"not an integer: {text!r}")
        return int(text)
    if expected is float:
        if not _FLOAT.fullmatch(text):
            raise ValueError(f"not a float: {text!r}")
        return float(text)
    if expected is datetime:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            raise ValueError(f"instant without offset: {text!r}")
        return parsed
    return text

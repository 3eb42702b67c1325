"""Identity & Expression Schemas — Pydantic models for API responses.

Invariants:
    - stable_id fields are the namespace-derived uuid5, never the handle
    - handle values are process-local and only meaningful against one store

Design Decisions:
    - Response models separate from core dataclasses: core stays free of pydantic
"""

from uuid import UUID

from pydantic import BaseModel


class NodeKindInfo(BaseModel):
    """A logic node kind and its stable identifier."""
    name: str
    tag: str
    category: str
    stable_id: UUID


class NodeHandleResponse(BaseModel):
    """Resolved handle for a kind in the current cache epoch."""
    kind: str
    stable_id: UUID
    handle: int
    epoch: int


class CanonicalExpression(BaseModel):
    """Canonical XML form of a submitted expression document."""
    name: str | None = None
    root_node_uuid: UUID
    node_count: int
    document: str

"""Node Kind Routes — stable identifiers and resolved handles for logic node kinds.

Invariants:
    - GET /node-kinds lists all 22 kinds in declaration order
    - GET /node-kinds/{name}/handle resolves through the shared IdentityResolver
    - Lookup failures propagate as TermLogicError (503 / 404 via global handler)

Design Decisions:
    - Sync handlers: resolve() may block on the identifier store, so FastAPI
      runs it on a worker thread instead of the event loop
"""

from fastapi import APIRouter, Depends, HTTPException, status

from termlogic.api.dependencies import get_resolver
from termlogic.core.domain_types import LogicNodeKind
from termlogic.core.node_identity import stable_id
from termlogic.schemas.identity import NodeHandleResponse, NodeKindInfo
from termlogic.services.identity_resolver import IdentityResolver

router = APIRouter(prefix="/api/v1/node-kinds", tags=["node-kinds"])


@router.get("", response_model=list[NodeKindInfo])
def list_node_kinds():
    return [
        NodeKindInfo(
            name=kind.name,
            tag=kind.value,
            category=kind.category.value,
            stable_id=stable_id(kind),
        )
        for kind in LogicNodeKind
    ]


@router.get("/{name}/handle", response_model=NodeHandleResponse)
def resolve_node_kind(
    name: str, resolver: IdentityResolver = Depends(get_resolver),
):
    kind = LogicNodeKind.__members__.get(name.upper())
    if kind is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown node kind '{name}'",
        )
    handle = resolver.resolve(kind)
    return NodeHandleResponse(
        kind=kind.name,
        stable_id=resolver.stable_id(kind),
        handle=handle,
        epoch=resolver.epoch,
    )

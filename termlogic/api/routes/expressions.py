"""Expression Routes — canonicalize submitted expression documents.

Invariants:
    - Request body is raw XML text; it only ever reaches the hardened parser
    - DOCTYPE / malformed input -> 400 MALFORMED_DOCUMENT via global handler
    - Response document is the deterministic serializer output

Design Decisions:
    - Body read from Request instead of a pydantic model: the payload is XML,
      not JSON
"""

from fastapi import APIRouter, Depends, Request

from termlogic.api.dependencies import get_serializer
from termlogic.core.logic_nodes import walk
from termlogic.core.node_identity import node_uuid
from termlogic.schemas.identity import CanonicalExpression
from termlogic.services.expression_serializer import ExpressionSerializer

router = APIRouter(prefix="/api/v1/expressions", tags=["expressions"])


@router.post("/canonicalize", response_model=CanonicalExpression)
async def canonicalize_expression(
    request: Request, serializer: ExpressionSerializer = Depends(get_serializer),
):
    body = await request.body()
    document = serializer.deserialize(body)
    return CanonicalExpression(
        name=document.name,
        root_node_uuid=node_uuid(document.root),
        node_count=sum(1 for _ in walk(document.root)),
        document=serializer.serialize(document),
    )

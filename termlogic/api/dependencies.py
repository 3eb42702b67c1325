"""Route Dependencies — process-wide service instances exposed to FastAPI.

Invariants:
    - One IdentityResolver and one ExpressionSerializer per app, built in lifespan
    - Routes obtain them only through these providers (tests override them)
"""

from fastapi import Request

from termlogic.services.expression_serializer import ExpressionSerializer
from termlogic.services.identity_resolver import IdentityResolver


def get_resolver(request: Request) -> IdentityResolver:
    resolver = getattr(request.app.state, "resolver", None)
    if resolver is None:
        raise RuntimeError("Identity resolver not initialized")
    return resolver


def get_serializer(request: Request) -> ExpressionSerializer:
    serializer = getattr(request.app.state, "serializer", None)
    if serializer is None:
        raise RuntimeError("Expression serializer not initialized")
    return serializer

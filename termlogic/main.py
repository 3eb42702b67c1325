"""termlogic API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TermLogicError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Identifier store, resolver and serializer built once on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Services stored on app.state and reached through api/dependencies.py so
      tests can swap them without touching module globals
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from termlogic.api.error_handlers import register_error_handlers
from termlogic.api.routes import expressions, health, node_kinds
from termlogic.config import get_settings
from termlogic.infrastructure.database import init_db
from termlogic.infrastructure.identifier_store import SqlIdentifierLookup
from termlogic.infrastructure.observability import setup_logging
from termlogic.services.expression_serializer import ExpressionSerializer
from termlogic.services.identity_resolver import IdentityResolver

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url, pool_pre_ping=settings.database_pool_pre_ping,
    )
    app.state.resolver = IdentityResolver(SqlIdentifierLookup(manager))
    app.state.serializer = ExpressionSerializer(
        indent=settings.serializer_indent,
        max_document_bytes=settings.max_document_bytes,
        max_depth=settings.max_expression_depth,
    )
    logger.info("termlogic API started")
    yield
    manager.dispose()
    logger.info("termlogic API shutting down")


app = FastAPI(title="termlogic API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(node_kinds.router)
app.include_router(expressions.router)

register_error_handlers(app)

"""Service test fixtures — resolver over FakeLookup + FastAPI test client.

Invariants:
    - Every client test gets a fresh resolver and a fresh in-memory SQLite store
    - app.state services set directly: ASGITransport does not run the lifespan
    - db_manager patched so readiness probes see the test database

Design Decisions:
    - Resolver built on FakeLookup, not the SQL store: route tests control
      handles and failures without seeding rows
"""

import pytest
from httpx import ASGITransport, AsyncClient

import termlogic.infrastructure.database as db_module
from termlogic.main import app
from termlogic.services.expression_serializer import ExpressionSerializer
from termlogic.services.identity_resolver import IdentityResolver


@pytest.fixture
def resolver(fake_lookup):
    return IdentityResolver(fake_lookup)


@pytest.fixture
async def client(resolver, db_manager):
    """FastAPI test client with services injected on app.state."""
    app.state.resolver = resolver
    app.state.serializer = ExpressionSerializer()

    original_manager = db_module.db_manager
    db_module.db_manager = db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    db_module.db_manager = original_manager
    del app.state.resolver
    del app.state.serializer

"""Root conftest — shared test configuration and fakes.

Invariants:
    - Tests never touch a real identifier store: DB fixtures use in-memory SQLite
    - FakeLookup records every call so tests can assert cache hits / misses
"""

import os
import threading
from uuid import UUID

import pytest
from sqlalchemy.pool import StaticPool

os.environ.setdefault("TERMLOGIC_DATABASE_URL", "sqlite://")
os.environ.setdefault("TERMLOGIC_LOG_FORMAT", "text")

from termlogic.core.node_identity import all_stable_ids  # noqa: E402
from termlogic.infrastructure.database import DatabaseSessionManager  # noqa: E402


class FakeLookup:
    """Deterministic IdentifierLookup: handle = position in declaration order + 1."""

    def __init__(self, handles: dict[UUID, int] | None = None):
        if handles is None:
            handles = {
                uid: i + 1 for i, uid in enumerate(all_stable_ids().values())
            }
        self.handles = handles
        self.calls: list[UUID] = []
        self.error: Exception | None = None
        self._lock = threading.Lock()

    def lookup(self, stable_id: UUID) -> int | None:
        with self._lock:
            self.calls.append(stable_id)
        if self.error is not None:
            raise self.error
        return self.handles.get(stable_id)


@pytest.fixture
def fake_lookup():
    return FakeLookup()


@pytest.fixture
def db_manager():
    """In-memory SQLite shared across threads, schema created."""
    manager = DatabaseSessionManager(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    manager.create_schema()
    yield manager
    manager.dispose()

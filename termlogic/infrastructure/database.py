"""Database Session Manager — connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py)

Design Decisions:
    - Synchronous engine: identity resolution blocks its caller by contract, and
      the HTTP layer runs sync routes on FastAPI's worker threadpool
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: returned rows stay readable after the session closes
"""

import logging
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.orm import Session, sessionmaker

from termlogic.core.errors import DatabaseError
from termlogic.db.base import Base

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages database sessions with pooling, rollback, and health checks."""

    def __init__(self, database_url: str, **engine_kwargs: Any):
        engine_kwargs.setdefault("pool_pre_ping", True)
        self.engine = create_engine(database_url, **engine_kwargs)
        self._session_factory = sessionmaker(
            self.engine, class_=Session, expire_on_commit=False,
        )

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown") from e
        finally:
            session.close()

    def create_schema(self) -> None:
        """Create missing tables (development and tests; production uses alembic)."""
        Base.metadata.create_all(self.engine)

    def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            with self.session() as db:
                db.execute(text("SELECT 1"))
            return True
        except DatabaseError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs: Any) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


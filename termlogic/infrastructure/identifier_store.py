"""SQL Identifier Store — IdentifierLookup backed by the identifier_mappings table.

Invariants:
    - lookup() returns None for identifiers with no row (reachable, not assigned)
    - Any database failure during lookup surfaces as LookupUnavailableError
    - assign() is idempotent: an identifier keeps the first handle it was given
    - Handles are dense positive integers starting at 1

Design Decisions:
    - Structural implementation of core.repository_protocols.IdentifierLookup
      (no inheritance), injected into IdentityResolver by the shell
    - In-process lock around assign(): concurrent provisioning in one process
      cannot race on max(handle)+1; cross-process races hit the unique
      constraint and surface as DatabaseError
"""

import logging
import threading
from uuid import UUID

from sqlalchemy import func, select

from termlogic.core.domain_types import LogicNodeKind
from termlogic.core.errors import DatabaseError, ErrorContext, LookupUnavailableError
from termlogic.core.node_identity import all_stable_ids
from termlogic.infrastructure.database import DatabaseSessionManager
from termlogic.models.identifier_mapping import IdentifierMapping

logger = logging.getLogger(__name__)


class SqlIdentifierLookup:
    """Identifier-lookup service over a relational identifier store."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db
        self._assign_lock = threading.Lock()

    def lookup(self, stable_id: UUID) -> int | None:
        try:
            with self._db.session() as session:
                return session.scalar(
                    select(IdentifierMapping.handle).where(
                        IdentifierMapping.stable_id == stable_id,
                    )
                )
        except DatabaseError as e:
            raise LookupUnavailableError(
                "Identifier store unreachable", ErrorContext(stable_id=stable_id),
            ) from e

    def assign(self, stable_id: UUID) -> int:
        """Return the identifier's handle, assigning the next free one if needed."""
        with self._assign_lock, self._db.session() as session:
            existing = session.scalar(
                select(IdentifierMapping.handle).where(
                    IdentifierMapping.stable_id == stable_id,
                )
            )
            if existing is not None:
                return existing
            current_max = session.scalar(
                select(func.max(IdentifierMapping.handle))
            )
            handle = (current_max or 0) + 1
            session.add(IdentifierMapping(stable_id=stable_id, handle=handle))
            session.commit()
            logger.info(
                f"Assigned handle {handle}",
                extra={"stable_id": stable_id},
            )
            return handle

    def provision_node_kinds(self) -> dict[LogicNodeKind, int]:
        """Assign handles for every node kind's stable id (bootstrap)."""
        return {
            kind: self.assign(identifier)
            for kind, identifier in all_stable_ids().items()
        }

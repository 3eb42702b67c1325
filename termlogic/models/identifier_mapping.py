"""IdentifierMapping ORM — persists stable identifier -> integer handle assignments.

Invariants:
    - stable_id is the primary key (one handle per identifier)
    - handle is unique and non-nullable; assigned handles are never reused
    - Rows are append-only: a handle, once assigned, never changes

Design Decisions:
    - sqlalchemy.Uuid column type: native UUID on PostgreSQL, CHAR(32) on SQLite,
      so the same model runs in tests and production
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from termlogic.db.base import Base


class IdentifierMapping(Base):
    """One stable identifier and the handle the store assigned to it."""
    __tablename__ = "identifier_mappings"

    stable_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    handle: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

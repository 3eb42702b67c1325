"""Identifier mappings — stable identifier to integer handle.

Revision ID: 001_identifier_mappings
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_identifier_mappings"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "identifier_mappings",
        sa.Column("stable_id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("handle", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("handle", name="uq_identifier_mappings_handle"),
    )


def downgrade() -> None:
    op.drop_table("identifier_mappings")

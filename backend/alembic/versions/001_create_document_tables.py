"""Create collections and documents tables

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Creates the storage for the document store: one row per collection,
       one row per document with its key, revision and JSON body.
How:   JSONB body on PostgreSQL, JSON elsewhere. See doccrud/models/document.py.

Rollback: downgrade() drops both tables (destructive, all documents lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "collections",
        sa.Column(
            "name",
            sa.String(256),
            nullable=False,
            comment="Collection name, unique across the database",
        ),
        sa.Column(
            "type",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'document'"),
            comment="Collection type; only document collections are supported",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("name"),
    )

    op.create_table(
        "documents",
        sa.Column(
            "seq",
            sa.Integer(),
            autoincrement=True,
            nullable=False,
            comment="Insertion sequence; defines collection iteration order",
        ),
        sa.Column("collection", sa.String(256), nullable=False),
        sa.Column(
            "key",
            sa.String(254),
            nullable=False,
            comment="Document key, unique within its collection",
        ),
        sa.Column(
            "rev",
            sa.String(32),
            nullable=False,
            comment="Opaque revision token, replaced on every mutation",
        ),
        sa.Column(
            "body",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("seq"),
        sa.ForeignKeyConstraint(
            ["collection"], ["collections.name"], ondelete="CASCADE"
        ),
        sa.UniqueConstraint("collection", "key", name="uq_documents_collection_key"),
    )

    op.create_index(
        "idx_documents_collection_seq",
        "documents",
        ["collection", "seq"],
    )


def downgrade() -> None:
    op.drop_index("idx_documents_collection_seq", table_name="documents")
    op.drop_table("documents")
    op.drop_table("collections")

"""
DocCRUD Backend - Document Store SQLAlchemy Models
===================================================

What:  ORM models for the `collections` and `documents` tables.
How:   Each named collection is a row in `collections`; each stored document
       is a row in `documents` holding its key, revision and JSON body.
Who:   Used by the document store and by Alembic for schema management.

Table Design:
    - documents.seq: autoincrement surrogate; its order is the collection
      iteration order returned by `all()` and `keys()`
    - (collection, key) is unique: enforces the per-collection primary key
    - body never contains the system attributes `_key`, `_id`, `_rev`
"""

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from doccrud.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
DocumentBody = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CollectionRecord(Base):
    """A named collection of documents."""

    __tablename__ = "collections"

    name: Mapped[str] = mapped_column(
        String(256),
        primary_key=True,
        comment="Collection name, unique across the database",
    )

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="document",
        server_default=text("'document'"),
        comment="Collection type; only document collections are supported",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<CollectionRecord(name='{self.name}', type='{self.type}')>"


class DocumentRecord(Base):
    """
    A stored document.

    Lifecycle:
        1. Inserted by `save` with a fresh revision
        2. Body overwritten by `replace` or merged by `update`, each with a new revision
        3. Deleted by `remove`; the key becomes free again
    """

    __tablename__ = "documents"

    seq: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Insertion sequence; defines collection iteration order",
    )

    collection: Mapped[str] = mapped_column(
        String(256),
        ForeignKey("collections.name", ondelete="CASCADE"),
        nullable=False,
    )

    key: Mapped[str] = mapped_column(
        String(254),
        nullable=False,
        comment="Document key, unique within its collection",
    )

    rev: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Opaque revision token, replaced on every mutation",
    )

    body: Mapped[Dict[str, Any]] = mapped_column(
        DocumentBody,
        nullable=False,
        default=dict,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("collection", "key", name="uq_documents_collection_key"),
        Index("idx_documents_collection_seq", "collection", "seq"),
    )

    def __repr__(self) -> str:
        return (
            f"<DocumentRecord(collection='{self.collection}', key='{self.key}', "
            f"rev='{self.rev}')>"
        )

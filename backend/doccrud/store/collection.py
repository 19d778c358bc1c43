"""
DocCRUD Backend - Document Collection Client
=============================================

What:  CRUD primitives over one named collection: all, keys, save, document,
       replace, update, remove.
How:   Every operation opens its own session and transaction from the shared
       session factory. Writes to an existing document are a compare-and-set
       on its revision, so a concurrent writer that got there first turns the
       second write into a CONFLICT instead of a lost update.
Who:   Built by DocumentStore.collection(); injected into the resource services.

Document shape on the way out:
    {"_key": "abc", "_id": "people/abc", "_rev": "1f3c...", ...body}
"""

import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from doccrud.models.document import CollectionRecord, DocumentRecord
from doccrud.store.errors import StoreError, StoreErrorKind

logger = logging.getLogger(__name__)

Document = Dict[str, Any]

SYSTEM_ATTRIBUTES = frozenset({"_key", "_id", "_rev", "_oldRev"})

_KEY_RE = re.compile(r"^[A-Za-z0-9_\-:.@()+,=;$!*'%]{1,254}$")


def generate_key() -> str:
    return uuid.uuid4().hex


def new_revision() -> str:
    return uuid.uuid4().hex[:16]


def validate_key(key: Any) -> str:
    """Return `key` unchanged or raise DOCUMENT_KEY_BAD."""
    if not isinstance(key, str) or not _KEY_RE.match(key):
        raise StoreError(
            StoreErrorKind.DOCUMENT_KEY_BAD,
            f"illegal document key: {key!r}",
            context={"key": repr(key)},
        )
    return key


def strip_system_attributes(doc: Mapping[str, Any]) -> Document:
    return {name: value for name, value in doc.items() if name not in SYSTEM_ATTRIBUTES}


def merge_patch(
    target: Mapping[str, Any],
    patch: Mapping[str, Any],
    *,
    keep_null: bool = True,
    merge_objects: bool = True,
) -> Document:
    """
    Merge `patch` into a copy of `target`.

    Nested objects present on both sides are merged recursively when
    `merge_objects` is set, otherwise the patch value replaces them. A null
    patch value is stored when `keep_null` is set and deletes the attribute
    when it is not.
    """
    merged = dict(target)
    for name, value in patch.items():
        if value is None and not keep_null:
            merged.pop(name, None)
            continue
        current = merged.get(name)
        if merge_objects and isinstance(value, dict) and isinstance(current, dict):
            merged[name] = merge_patch(
                current, value, keep_null=keep_null, merge_objects=merge_objects
            )
        else:
            merged[name] = value
    return merged


class DocumentCollection:
    """
    Client for a single document collection.

    The handle is lazy: constructing it never touches the database, and every
    operation checks that the collection exists (COLLECTION_NOT_FOUND otherwise).
    """

    def __init__(self, name: str, session_factory: async_sessionmaker[AsyncSession]):
        self.name = name
        self._session_factory = session_factory

    def __repr__(self) -> str:
        return f"<DocumentCollection(name='{self.name}')>"

    # ── Helpers ───────────────────────────────────────────────────────────

    def document_id(self, key: str) -> str:
        return f"{self.name}/{key}"

    def _meta(self, key: str, rev: str, old_rev: Optional[str] = None) -> Document:
        meta = {"_id": self.document_id(key), "_key": key, "_rev": rev}
        if old_rev is not None:
            meta["_oldRev"] = old_rev
        return meta

    def _to_document(self, record: DocumentRecord) -> Document:
        doc: Document = {
            "_key": record.key,
            "_id": self.document_id(record.key),
            "_rev": record.rev,
        }
        doc.update(record.body)
        return doc

    def _error(self, kind: StoreErrorKind, message: Optional[str] = None, **context: Any) -> StoreError:
        return StoreError(kind, message, context={"collection": self.name, **context})

    async def _require_collection(self, session: AsyncSession) -> None:
        found = await session.scalar(
            select(CollectionRecord.name).where(CollectionRecord.name == self.name)
        )
        if found is None:
            raise self._error(
                StoreErrorKind.COLLECTION_NOT_FOUND,
                f"collection or view not found: {self.name}",
            )

    async def _get_record(self, session: AsyncSession, key: str) -> DocumentRecord:
        record = await session.scalar(
            select(DocumentRecord).where(
                DocumentRecord.collection == self.name,
                DocumentRecord.key == key,
            )
        )
        if record is None:
            raise self._error(StoreErrorKind.DOCUMENT_NOT_FOUND, key=key)
        return record

    def _check_revision(self, record: DocumentRecord, rev: Optional[str]) -> None:
        if rev is not None and rev != record.rev:
            raise self._error(
                StoreErrorKind.CONFLICT, key=record.key, expected=rev, actual=record.rev
            )

    async def _write_body(
        self, session: AsyncSession, record: DocumentRecord, body: Document
    ) -> str:
        """Compare-and-set the body on the record's current revision."""
        rev = new_revision()
        result = await session.execute(
            update(DocumentRecord)
            .where(DocumentRecord.seq == record.seq, DocumentRecord.rev == record.rev)
            .values(body=body, rev=rev, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise self._error(StoreErrorKind.CONFLICT, key=record.key)
        return rev

    # ── Reads ─────────────────────────────────────────────────────────────

    async def all(self) -> List[Document]:
        """Every document in the collection, in iteration (insertion) order."""
        async with self._session_factory() as session:
            await self._require_collection(session)
            records = await session.scalars(
                select(DocumentRecord)
                .where(DocumentRecord.collection == self.name)
                .order_by(DocumentRecord.seq)
            )
            return [self._to_document(record) for record in records]

    async def keys(self) -> List[str]:
        """Projection of `_key` over the collection, in iteration order."""
        async with self._session_factory() as session:
            await self._require_collection(session)
            keys = await session.scalars(
                select(DocumentRecord.key)
                .where(DocumentRecord.collection == self.name)
                .order_by(DocumentRecord.seq)
            )
            return list(keys)

    async def document(self, key: str) -> Document:
        async with self._session_factory() as session:
            await self._require_collection(session)
            record = await self._get_record(session, key)
            return self._to_document(record)

    # ── Writes ────────────────────────────────────────────────────────────

    async def save(self, doc: Mapping[str, Any]) -> Document:
        """
        Insert a new document.

        Uses the caller's `_key` when present, otherwise generates one.

        Returns:
            Meta dict with `_id`, `_key` and `_rev`

        Raises:
            StoreError: UNIQUE_CONSTRAINT_VIOLATED if the key is taken,
                DOCUMENT_KEY_BAD for an illegal key
        """
        key = doc.get("_key")
        key = generate_key() if key is None else validate_key(key)
        rev = new_revision()
        duplicate_message = (
            "unique constraint violated - in index primary of type primary "
            f"over '_key'; conflicting key: {key}"
        )

        async with self._session_factory.begin() as session:
            await self._require_collection(session)
            existing = await session.scalar(
                select(DocumentRecord.seq).where(
                    DocumentRecord.collection == self.name,
                    DocumentRecord.key == key,
                )
            )
            if existing is not None:
                raise self._error(
                    StoreErrorKind.UNIQUE_CONSTRAINT_VIOLATED, duplicate_message, key=key
                )
            session.add(
                DocumentRecord(
                    collection=self.name,
                    key=key,
                    rev=rev,
                    body=strip_system_attributes(doc),
                )
            )
            try:
                await session.flush()
            except IntegrityError as exc:
                # Lost a race with a concurrent insert of the same key
                raise self._error(
                    StoreErrorKind.UNIQUE_CONSTRAINT_VIOLATED, duplicate_message, key=key
                ) from exc

        logger.debug("Saved %s (rev %s)", self.document_id(key), rev)
        return self._meta(key, rev)

    async def replace(
        self, key: str, doc: Mapping[str, Any], rev: Optional[str] = None
    ) -> Document:
        """
        Overwrite the body of an existing document.

        System attributes in `doc` are ignored; the key never changes.

        Returns:
            Meta dict with `_id`, `_key`, `_rev` and `_oldRev`
        """
        body = strip_system_attributes(doc)
        async with self._session_factory.begin() as session:
            await self._require_collection(session)
            record = await self._get_record(session, key)
            self._check_revision(record, rev)
            old_rev = record.rev
            new_rev = await self._write_body(session, record, body)

        logger.debug("Replaced %s (rev %s -> %s)", self.document_id(key), old_rev, new_rev)
        return self._meta(key, new_rev, old_rev=old_rev)

    async def update(
        self,
        key: str,
        patch: Mapping[str, Any],
        rev: Optional[str] = None,
        *,
        keep_null: bool = True,
        merge_objects: bool = True,
    ) -> Document:
        """
        Merge `patch` into an existing document (see `merge_patch`).

        Returns:
            Meta dict with `_id`, `_key`, `_rev` and `_oldRev`
        """
        changes = strip_system_attributes(patch)
        async with self._session_factory.begin() as session:
            await self._require_collection(session)
            record = await self._get_record(session, key)
            self._check_revision(record, rev)
            old_rev = record.rev
            body = merge_patch(
                record.body, changes, keep_null=keep_null, merge_objects=merge_objects
            )
            new_rev = await self._write_body(session, record, body)

        logger.debug("Updated %s (rev %s -> %s)", self.document_id(key), old_rev, new_rev)
        return self._meta(key, new_rev, old_rev=old_rev)

    async def remove(self, key: str, rev: Optional[str] = None) -> Document:
        """
        Delete a document.

        Returns:
            Meta dict of the removed revision
        """
        async with self._session_factory.begin() as session:
            await self._require_collection(session)
            record = await self._get_record(session, key)
            self._check_revision(record, rev)
            result = await session.execute(
                delete(DocumentRecord)
                .where(DocumentRecord.seq == record.seq, DocumentRecord.rev == record.rev)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise self._error(StoreErrorKind.CONFLICT, key=key)

        logger.debug("Removed %s (rev %s)", self.document_id(key), record.rev)
        return self._meta(key, record.rev)

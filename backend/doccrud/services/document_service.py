"""
DocCRUD Backend - Document Service (Verb → Store Operation)
============================================================

What:  Maps each CRUD operation to exactly one store call (two for update)
       and translates the store errors each operation expects into HTTP-level
       application exceptions.
How:   Wraps a DocumentCollection received at construction time. Store errors
       of any kind not listed for an operation propagate unchanged.
Who:   Called by the resource and entries routers.

Translation table:
    create   UNIQUE_CONSTRAINT_VIOLATED → ConflictError (409)
    detail   DOCUMENT_NOT_FOUND         → NotFoundError (404)
    replace  DOCUMENT_NOT_FOUND → 404, CONFLICT → 409
    update   DOCUMENT_NOT_FOUND → 404, CONFLICT → 409
    delete   DOCUMENT_NOT_FOUND → 404
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional

from doccrud.exceptions import ConflictError, NotFoundError
from doccrud.store import Document, DocumentCollection, StoreError, StoreErrorKind

logger = logging.getLogger(__name__)


@contextmanager
def translate_store_errors(
    *kinds: StoreErrorKind, not_found_message: Optional[str] = None
) -> Iterator[None]:
    """
    Re-raise store errors whose kind is in `kinds` as application exceptions.

    Any other StoreError (and any other exception) passes through untouched.
    The application exception echoes the store's message unless
    `not_found_message` overrides it for DOCUMENT_NOT_FOUND.
    """
    try:
        yield
    except StoreError as exc:
        if exc.kind not in kinds:
            raise
        match exc.kind:
            case StoreErrorKind.DOCUMENT_NOT_FOUND:
                raise NotFoundError(
                    message=not_found_message or exc.message, context=exc.context
                ) from exc
            case StoreErrorKind.UNIQUE_CONSTRAINT_VIOLATED | StoreErrorKind.CONFLICT:
                raise ConflictError(message=exc.message, context=exc.context) from exc
            case _:
                raise


class DocumentService:
    """
    CRUD operations for one resource collection.

    Stateless apart from the collection client; nothing is cached between
    requests.
    """

    def __init__(self, collection: DocumentCollection):
        self.collection = collection

    @property
    def name(self) -> str:
        return self.collection.name

    async def list(self) -> List[Document]:
        return await self.collection.all()

    async def create(self, doc: Dict[str, Any]) -> Document:
        """
        Save `doc` and return it merged with the store-assigned meta.

        Raises:
            ConflictError: a document with the same `_key` already exists
        """
        with translate_store_errors(StoreErrorKind.UNIQUE_CONSTRAINT_VIOLATED):
            meta = await self.collection.save(doc)
        logger.info("Created %s", meta["_id"])
        return {**doc, **meta}

    async def create_many(self, docs: List[Dict[str, Any]]) -> List[Document]:
        """Save each document in order; store errors are not translated."""
        created = []
        for doc in docs:
            meta = await self.collection.save(doc)
            created.append({**doc, **meta})
        logger.info("Created %d document(s) in '%s'", len(created), self.name)
        return created

    async def detail(self, key: str, not_found_message: Optional[str] = None) -> Document:
        with translate_store_errors(
            StoreErrorKind.DOCUMENT_NOT_FOUND, not_found_message=not_found_message
        ):
            return await self.collection.document(key)

    async def replace(self, key: str, doc: Dict[str, Any]) -> Document:
        """Overwrite the document and return the new body merged with its meta."""
        with translate_store_errors(
            StoreErrorKind.DOCUMENT_NOT_FOUND, StoreErrorKind.CONFLICT
        ):
            meta = await self.collection.replace(key, doc)
        logger.info("Replaced %s", meta["_id"])
        return {**doc, **meta}

    async def update(self, key: str, patch: Mapping[str, Any]) -> Document:
        """
        Merge `patch` into the document, then read it back.

        The update and the read are separate store calls; a concurrent write
        landing between them is visible in the returned document.
        """
        with translate_store_errors(
            StoreErrorKind.DOCUMENT_NOT_FOUND, StoreErrorKind.CONFLICT
        ):
            await self.collection.update(key, patch)
            doc = await self.collection.document(key)
        logger.info("Updated %s", doc["_id"])
        return doc

    async def delete(self, key: str) -> None:
        with translate_store_errors(StoreErrorKind.DOCUMENT_NOT_FOUND):
            await self.collection.remove(key)
        logger.info("Removed %s/%s", self.name, key)

    async def keys(self) -> List[str]:
        return await self.collection.keys()

"""
DocCRUD Backend - Document Store Client
========================================

What:  Database-level handle: creates, lists and drops collections and hands
       out DocumentCollection clients.
How:   Wraps a session factory. The app factory builds exactly one store per
       application and passes collection clients to the routers explicitly.
Who:   doccrud.main, the bootstrap/teardown scripts, the health route, tests.
"""

import logging
import re
from typing import List

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from doccrud.database import create_session_factory
from doccrud.models.document import CollectionRecord, DocumentRecord
from doccrud.store.collection import DocumentCollection
from doccrud.store.errors import StoreError, StoreErrorKind

logger = logging.getLogger(__name__)

_COLLECTION_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_\-]{0,255}$")


class DocumentStore:
    """Entry point to the document store."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DocumentStore":
        return cls(create_session_factory(engine))

    def collection(self, name: str) -> DocumentCollection:
        """Return a lazy client for `name`; existence is checked per operation."""
        return DocumentCollection(name, self._session_factory)

    async def has_collection(self, name: str) -> bool:
        async with self._session_factory() as session:
            found = await session.scalar(
                select(CollectionRecord.name).where(CollectionRecord.name == name)
            )
            return found is not None

    async def collection_names(self) -> List[str]:
        async with self._session_factory() as session:
            names = await session.scalars(
                select(CollectionRecord.name).order_by(CollectionRecord.name)
            )
            return list(names)

    async def create_document_collection(self, name: str) -> DocumentCollection:
        """
        Create a new document collection.

        Raises:
            StoreError: ILLEGAL_NAME for an invalid name, DUPLICATE_NAME if a
                collection with that name already exists
        """
        if not isinstance(name, str) or not _COLLECTION_NAME_RE.match(name):
            raise StoreError(
                StoreErrorKind.ILLEGAL_NAME,
                f"illegal name: {name!r}",
                context={"collection": repr(name)},
            )

        async with self._session_factory.begin() as session:
            existing = await session.scalar(
                select(CollectionRecord.name).where(CollectionRecord.name == name)
            )
            if existing is not None:
                raise StoreError(
                    StoreErrorKind.DUPLICATE_NAME,
                    f"duplicate name: {name}",
                    context={"collection": name},
                )
            session.add(CollectionRecord(name=name, type="document"))
            try:
                await session.flush()
            except IntegrityError as exc:
                raise StoreError(
                    StoreErrorKind.DUPLICATE_NAME,
                    f"duplicate name: {name}",
                    context={"collection": name},
                ) from exc

        logger.info("Created document collection '%s'", name)
        return self.collection(name)

    async def drop_collection(self, name: str) -> None:
        """
        Drop a collection and every document in it.

        Raises:
            StoreError: COLLECTION_NOT_FOUND if it does not exist
        """
        async with self._session_factory.begin() as session:
            await session.execute(
                delete(DocumentRecord).where(DocumentRecord.collection == name)
            )
            result = await session.execute(
                delete(CollectionRecord).where(CollectionRecord.name == name)
            )
            if result.rowcount == 0:
                raise StoreError(
                    StoreErrorKind.COLLECTION_NOT_FOUND,
                    f"collection or view not found: {name}",
                    context={"collection": name},
                )

        logger.info("Dropped collection '%s'", name)

    async def ping(self) -> None:
        """Round-trip a trivial query; raises whatever the driver raises."""
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))

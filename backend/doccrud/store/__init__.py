# Store package init
"""
DocCRUD Backend - Document Store
=================================

What:  Named collections of JSON documents keyed by a unique string key.
How:   Implemented over async SQLAlchemy; see client.py and collection.py.

Operations per collection:
    all, keys, save, document, replace, update, remove

Error kinds (StoreErrorKind):
    DOCUMENT_NOT_FOUND, UNIQUE_CONSTRAINT_VIOLATED, CONFLICT,
    COLLECTION_NOT_FOUND, DUPLICATE_NAME, ILLEGAL_NAME, DOCUMENT_KEY_BAD
"""

from doccrud.store.client import DocumentStore
from doccrud.store.collection import Document, DocumentCollection
from doccrud.store.errors import StoreError, StoreErrorKind

__all__ = [
    "Document",
    "DocumentCollection",
    "DocumentStore",
    "StoreError",
    "StoreErrorKind",
]

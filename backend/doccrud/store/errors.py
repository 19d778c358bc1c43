"""
DocCRUD Backend - Document Store Errors
========================================

What:  The single exception type raised by the document store, tagged with a
       `StoreErrorKind`.
How:   Callers catch `StoreError` and branch on `exc.kind`. The numeric codes
       are the document store's own error numbers and are reported verbatim
       when an error reaches the client untranslated.
"""

from enum import IntEnum
from typing import Any, Dict, Optional


class StoreErrorKind(IntEnum):
    """Store error kinds, valued by their numeric error code."""

    CONFLICT = 1200
    DOCUMENT_NOT_FOUND = 1202
    COLLECTION_NOT_FOUND = 1203
    DUPLICATE_NAME = 1207
    ILLEGAL_NAME = 1208
    UNIQUE_CONSTRAINT_VIOLATED = 1210
    DOCUMENT_KEY_BAD = 1221

    @property
    def default_message(self) -> str:
        return _DEFAULT_MESSAGES[self]


_DEFAULT_MESSAGES = {
    StoreErrorKind.CONFLICT: "conflict, _rev values do not match",
    StoreErrorKind.DOCUMENT_NOT_FOUND: "document not found",
    StoreErrorKind.COLLECTION_NOT_FOUND: "collection or view not found",
    StoreErrorKind.DUPLICATE_NAME: "duplicate name",
    StoreErrorKind.ILLEGAL_NAME: "illegal name",
    StoreErrorKind.UNIQUE_CONSTRAINT_VIOLATED: "unique constraint violated",
    StoreErrorKind.DOCUMENT_KEY_BAD: "illegal document key",
}


class StoreError(Exception):
    """
    Raised by DocumentStore and DocumentCollection operations.

    Attributes:
        kind:    What went wrong (compare against StoreErrorKind members)
        message: Store-level description, safe to echo to API clients
        context: Debug details (collection, key) for server-side logs
    """

    def __init__(
        self,
        kind: StoreErrorKind,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.kind = kind
        self.message = message or kind.default_message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def code(self) -> int:
        return int(self.kind)

    def __repr__(self) -> str:
        return f"StoreError(kind={self.kind.name}, message={self.message!r})"

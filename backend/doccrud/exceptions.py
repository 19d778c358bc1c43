"""
DocCRUD Backend - Custom Exception Hierarchy
=============================================

What:  Application-level exceptions that carry an HTTP meaning.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by the document service when it translates store errors.

Exception Hierarchy:
    DocCrudError (base)
    ├── NotFoundError    → 404 Not Found
    └── ConflictError    → 409 Conflict

Store errors that are not translated into one of these stay `StoreError`
and are answered with 500 by the handler in main.py.
"""

from typing import Any, Dict, Optional


class DocCrudError(Exception):
    """
    Base exception for all DocCRUD application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(DocCrudError):
    """
    Raised when a requested document does not exist.

    HTTP:    404 Not Found
    Message: the store's own message (e.g. "document not found"), or a
             resource-specific one supplied by the route.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        message: str = "The requested resource was not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConflictError(DocCrudError):
    """
    Raised for a duplicate key on create or a stale revision on replace/update.

    HTTP:    409 Conflict
    Message: the store's own message.
    """

    status_code = 409
    error_code = "conflict"

    def __init__(
        self,
        message: str = "The resource was modified or already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

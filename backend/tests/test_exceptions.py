"""
DocCRUD Backend - Exception Hierarchy Tests
============================================
"""

import pytest

from doccrud import exceptions
from doccrud.exceptions import ConflictError, DocCrudError, NotFoundError


class TestExceptionHierarchy:

    @pytest.mark.parametrize(
        "exc_class, status_code, error_code",
        [(NotFoundError, 404, "not_found"), (ConflictError, 409, "conflict")],
    )
    def test_status_and_error_codes(self, exc_class, status_code, error_code):
        exc = exc_class(message="boom", context={"key": "k"})

        assert isinstance(exc, DocCrudError)
        assert exc.status_code == status_code
        assert exc.error_code == error_code
        assert exc.message == "boom"
        assert exc.context == {"key": "k"}

    def test_only_store_translations_are_exported(self):
        subclasses = {
            cls.__name__
            for cls in vars(exceptions).values()
            if isinstance(cls, type) and issubclass(cls, DocCrudError) and cls is not DocCrudError
        }
        assert subclasses == {"NotFoundError", "ConflictError"}

"""
DocCRUD Backend - Application Package Initializer
==================================================

What: Marks the `doccrud` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is a thin HTTP adapter over a document collection store:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (verb → store mapping)   │  ← Error-kind translation
    ├─────────────────────────────────────┤
    │     Store (collections/documents)   │  ← Keys, revisions, conflicts
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never see SQL. They receive a collection client when they are built
    and only call its document operations.
"""

__version__ = "1.0.0"

"""
DocCRUD Backend - Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, fresh per test):
    test_settings → engine (SQLite file + schema) → store → bootstrapped_store
                                                          └── test_client
    mock_collection: AsyncMock stand-in for a DocumentCollection
"""

import os
import tempfile

# Override settings for testing BEFORE any doccrud imports
os.environ["DATABASE_URL"] = (
    f"sqlite+aiosqlite:///{os.path.join(tempfile.mkdtemp(prefix='doccrud_test_'), 'test.db')}"
)
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from doccrud.config import Settings
from doccrud.database import create_engine_from_settings, create_schema, dispose_engine
from doccrud.scripts.setup import ensure_collections
from doccrud.store import DocumentStore


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a fresh SQLite file for this test."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'doccrud.db'}",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def engine(test_settings):
    """Async engine with the store tables created."""
    engine = create_engine_from_settings(test_settings)
    await create_schema(engine)
    yield engine
    await dispose_engine(engine)


@pytest_asyncio.fixture
async def store(engine) -> DocumentStore:
    """A document store with no collections yet."""
    return DocumentStore.from_engine(engine)


@pytest_asyncio.fixture
async def bootstrapped_store(store, test_settings) -> DocumentStore:
    """A document store with people, todo and entries collections."""
    await ensure_collections(store, test_settings.required_collections)
    return store


@pytest_asyncio.fixture
async def test_client(test_settings, bootstrapped_store):
    """
    HTTPX AsyncClient talking to a fresh app over ASGITransport.

    ASGITransport does not run the lifespan, so the store is bootstrapped by
    the fixture chain instead.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from doccrud.main import create_app

    app = create_app(test_settings, store=bootstrapped_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_collection():
    """
    A MagicMock shaped like DocumentCollection with async operations.

    Usage:
        mock_collection.save.return_value = {"_id": "people/k", "_key": "k", "_rev": "r"}
    """
    collection = MagicMock()
    collection.name = "people"
    collection.all = AsyncMock(return_value=[])
    collection.keys = AsyncMock(return_value=[])
    collection.save = AsyncMock()
    collection.document = AsyncMock()
    collection.replace = AsyncMock()
    collection.update = AsyncMock()
    collection.remove = AsyncMock()
    return collection


@pytest.fixture
def sample_person():
    """A person document as a client would send it."""
    return {"name": "Alice", "age": 30, "city": "Berlin"}

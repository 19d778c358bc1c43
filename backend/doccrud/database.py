"""
DocCRUD Backend - Database Engine and Session Factory
======================================================

What:  Async SQLAlchemy engine construction, session factory, and ORM base.
How:   `create_engine_from_settings()` builds an engine with connection pooling
       (PostgreSQL) or a plain file engine (SQLite); `create_session_factory()`
       wraps it. The document store owns the factory and opens one session per
       store operation.
Who:   The app factory, the bootstrap scripts, Alembic and the test suite.
When:  Once per process (or per test); sessions are created per store call.

Connection Pooling Strategy:
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour
"""

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from doccrud.config import Settings, settings as default_settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object with Alembic and the test suite's
    `create_all`.
    """
    pass


def _engine_options(config: Settings) -> Dict[str, Any]:
    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": config.log_level == "DEBUG",
    }
    if config.database_url.startswith("sqlite"):
        # SQLite has no server-side pool to tune
        return options
    options.update(
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_pre_ping=config.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


def create_engine_from_settings(config: Optional[Settings] = None) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    Args:
        config: Settings to read from (defaults to the module singleton)

    Returns:
        A lazily-connecting AsyncEngine. No connection is opened until the
        first store operation.
    """
    config = config or default_settings
    return create_async_engine(config.database_url, **_engine_options(config))


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: ORM rows stay readable after the transaction ends
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """
    Create the store tables if they do not exist.

    Deployments run Alembic instead; this is used by tests and local
    SQLite setups.
    """
    # Registers the models on Base.metadata
    from doccrud.models import document  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close all pooled connections. Called during application shutdown."""
    await engine.dispose()

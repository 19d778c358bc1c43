"""
Alembic Migration Environment for the DocCRUD Document Store
=============================================================

What:  Migrates the two tables behind the document store:
           collections  one row per named collection (people, todo, entries)
           documents    one row per stored document: key, revision, JSON body
How:   The target URL is DATABASE_URL from doccrud settings, so the app, the
       bootstrap scripts and migrations always hit the same database.
       Online runs go through an async engine (asyncpg on PostgreSQL,
       aiosqlite locally) and hand the sync connection to Alembic.
Who:   `alembic upgrade head` from backend/, before `doccrud-setup` creates
       the collection rows.

SQLite notes:
    SQLite cannot ALTER most constraints in place; batch mode is enabled for
    it so future revisions touching the unique (collection, key) constraint
    can be autogenerated.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from doccrud.config import settings
from doccrud.database import Base

# Registers CollectionRecord and DocumentRecord on Base.metadata
from doccrud.models import document  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

config.set_main_option("sqlalchemy.url", settings.database_url)

target_metadata = Base.metadata

_is_sqlite = settings.database_url.startswith("sqlite")


def _configure_options() -> dict:
    return {
        "target_metadata": target_metadata,
        # Detects JSON vs JSONB body and String length changes
        "compare_type": True,
        "render_as_batch": _is_sqlite,
    }


def run_migrations_offline() -> None:
    """Print the DDL for the document tables without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(),
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, **_configure_options())

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Apply pending revisions through a throwaway async engine."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    try:
        async with connectable.connect() as connection:
            await connection.run_sync(do_run_migrations)
    finally:
        await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())

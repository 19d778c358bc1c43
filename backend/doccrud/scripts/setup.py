"""
DocCRUD Backend - Collection Bootstrap
=======================================

What:  Creates every collection the service needs, skipping existing ones.
How:   For each configured name, in order: if the store has no collection by
       that name, create it as a document collection. Running it again is a
       no-op. A collection created concurrently by another process between the
       check and the create is treated as already present.
Who:   The app lifespan (BOOTSTRAP_ON_STARTUP) and the `doccrud-setup` script.
When:  At deployment, before any router handles requests.
"""

import asyncio
import logging
from typing import Iterable, List, Optional

from doccrud.config import Settings, settings as default_settings
from doccrud.database import create_engine_from_settings, dispose_engine
from doccrud.logs import setup_logging
from doccrud.store import DocumentStore, StoreError, StoreErrorKind

logger = logging.getLogger(__name__)


async def ensure_collections(store: DocumentStore, names: Iterable[str]) -> List[str]:
    """
    Create each missing collection in `names`.

    Returns:
        The names that were created by this call, in order
    """
    created: List[str] = []
    for name in names:
        if await store.has_collection(name):
            logger.debug("Collection '%s' already exists", name)
            continue
        try:
            await store.create_document_collection(name)
        except StoreError as exc:
            if exc.kind is not StoreErrorKind.DUPLICATE_NAME:
                raise
            logger.debug("Collection '%s' was created concurrently", name)
            continue
        created.append(name)
    return created


async def run_setup(config: Optional[Settings] = None) -> List[str]:
    """Open a store from settings, ensure the required collections, close it."""
    config = config or default_settings
    engine = create_engine_from_settings(config)
    try:
        store = DocumentStore.from_engine(engine)
        return await ensure_collections(store, config.required_collections)
    finally:
        await dispose_engine(engine)


def main() -> None:
    setup_logging(default_settings.log_level)
    created = asyncio.run(run_setup())
    if created:
        logger.info("Created collections: %s", ", ".join(created))
    else:
        logger.info("All collections already exist")


if __name__ == "__main__":
    main()

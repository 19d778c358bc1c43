"""
DocCRUD Backend - Collection Teardown
======================================

What:  Drops the service's collections and all their documents.
How:   Mirror of setup.py; collections that are already gone are skipped.
Who:   The `doccrud-teardown` script, when uninstalling the service.
"""

import asyncio
import logging
from typing import Iterable, List, Optional

from doccrud.config import Settings, settings as default_settings
from doccrud.database import create_engine_from_settings, dispose_engine
from doccrud.logs import setup_logging
from doccrud.store import DocumentStore, StoreError, StoreErrorKind

logger = logging.getLogger(__name__)


async def drop_collections(store: DocumentStore, names: Iterable[str]) -> List[str]:
    """
    Drop each collection in `names` that exists.

    Returns:
        The names that were dropped by this call, in order
    """
    dropped: List[str] = []
    for name in names:
        try:
            await store.drop_collection(name)
        except StoreError as exc:
            if exc.kind is not StoreErrorKind.COLLECTION_NOT_FOUND:
                raise
            logger.debug("Collection '%s' does not exist", name)
            continue
        dropped.append(name)
    return dropped


async def run_teardown(config: Optional[Settings] = None) -> List[str]:
    config = config or default_settings
    engine = create_engine_from_settings(config)
    try:
        store = DocumentStore.from_engine(engine)
        return await drop_collections(store, config.required_collections)
    finally:
        await dispose_engine(engine)


def main() -> None:
    setup_logging(default_settings.log_level)
    dropped = asyncio.run(run_teardown())
    logger.info("Dropped collections: %s", ", ".join(dropped) or "none")


if __name__ == "__main__":
    main()

"""
DocCRUD Backend - Logging Configuration
========================================

What:  One place that configures the root logger for the API and the scripts.
When:  Called once at startup (app lifespan or script entry point), before any
       other initialization logs.

Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,  # Override any existing logging config
    )

    # These libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

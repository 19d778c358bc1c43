"""
DocCRUD Backend - FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds the document store, one service per
       collection, and one router per service, then wires middleware and
       exception handlers.
Who:   Called by uvicorn to start the server (uvicorn doccrud.main:app) and by
       the test suite with its own settings and store.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:                                            │
    │    /people  /todo     (resource routers)            │
    │    /entries           (schema-less router)          │
    │    /hello-world /hello/{name} /sum  /health         │
    │                                                     │
    │  Exception Handlers:                                │
    │    Validation→400  NotFound→404  Conflict→409       │
    │    StoreError→500  Exception→500                    │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, ensure collections (BOOTSTRAP_ON_STARTUP)
    Shutdown: dispose the engine if the factory created it
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncGenerator, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.exceptions import HTTPException as StarletteHTTPException

from doccrud import __version__
from doccrud.config import Settings, settings as default_settings
from doccrud.database import create_engine_from_settings, dispose_engine
from doccrud.exceptions import ConflictError, NotFoundError
from doccrud.logs import setup_logging
from doccrud.middleware.logging import RequestLoggingMiddleware
from doccrud.middleware.request_id import RequestIDMiddleware, request_id_var
from doccrud.routes import health, hello
from doccrud.routes.entries import create_entries_router
from doccrud.routes.resources import create_resource_router
from doccrud.schemas.document import PersonDocument, TodoDocument
from doccrud.scripts.setup import ensure_collections
from doccrud.services.document_service import DocumentService
from doccrud.store import DocumentStore, StoreError

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
}


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

def _build_lifespan(
    config: Settings, store: DocumentStore, engine: Optional[AsyncEngine]
) -> Callable[[FastAPI], AsyncContextManager[None]]:
    """
    Build the lifespan context for one app instance.

    Startup sequence:
        1. Setup logging
        2. Ensure the required collections exist (idempotent)
    Shutdown sequence:
        1. Dispose the engine, when this factory created it
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(config.log_level)
        logger.info("DocCRUD Backend %s starting up...", __version__)

        if config.bootstrap_on_startup:
            created = await ensure_collections(store, config.required_collections)
            if created:
                logger.info("Created collections: %s", ", ".join(created))

        logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)

        yield  # Application runs here

        logger.info("DocCRUD Backend shutting down...")
        if engine is not None:
            await dispose_engine(engine)
        logger.info("Shutdown complete.")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and a common JSON error body.

    Handler hierarchy:
        RequestValidationError                   → 400 Bad Request
        HTTPException (routing 404/405, ...)     → its own status
        NotFoundError                            → 404 Not Found
        ConflictError                            → 409 Conflict
        StoreError (untranslated)                → 500, store code and message kept
        Exception (fallback)                     → 500 Internal Server Error
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body, path or query failed its schema; no store call was made."""
        rid = request_id_var.get("")
        errors = jsonable_encoder(exc.errors())
        logger.warning("[%s] Request validation failed: %d error(s)", rid, len(errors))
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Request validation failed",
                "details": {"errors": errors},
                "request_id": rid,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Routing-level errors (unknown path, wrong method) in the common error shape."""
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
                "message": str(exc.detail),
                "request_id": rid,
            },
            headers=exc.headers,
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        rid = request_id_var.get("")
        logger.warning("[%s] Conflict: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=409,
            content={
                "error": "conflict",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        """A store error no route translates: reported as-is with a 500."""
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unhandled store error %d: %s | Context: %s",
            rid,
            exc.code,
            exc.message,
            exc.context,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "store_error",
                "message": exc.message,
                "details": {"code": exc.code, "kind": exc.kind.name},
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all; the stack trace is logged server-side only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to use (defaults to the environment-loaded singleton)
        store:  Document store to serve from. When omitted, an engine is
                created from `config.database_url` and disposed on shutdown.

    Returns:
        Fully configured FastAPI instance. The store is also exposed as
        `app.state.store`.
    """
    config = config or default_settings
    engine: Optional[AsyncEngine] = None
    if store is None:
        engine = create_engine_from_settings(config)
        store = DocumentStore.from_engine(engine)

    app = FastAPI(
        title="DocCRUD API",
        description="CRUD endpoints for people, todo items and generic entries over a document store.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=_build_lifespan(config, store, engine),
    )
    app.state.store = store
    app.state.settings = config

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Location"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    people = DocumentService(store.collection(config.people_collection))
    todo = DocumentService(store.collection(config.todo_collection))
    entries = DocumentService(store.collection(config.entries_collection))

    app.include_router(
        create_resource_router(people, PersonDocument, prefix="/people", label="person")
    )
    app.include_router(
        create_resource_router(todo, TodoDocument, prefix="/todo", label="todo")
    )
    app.include_router(create_entries_router(entries, prefix="/entries"))
    app.include_router(hello.router)
    app.include_router(health.router)

    return app


# uvicorn expects `doccrud.main:app` to be importable
app = create_app()

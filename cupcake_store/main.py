"""
Cupcake Store — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers, routers and the
       static frontend; lifespan() owns the Database for the process.
Who:   uvicorn (`cupcake_store.main:app`), run(), and the test suite,
       which calls create_app(database=...) with its own Database.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:                                            │
    │  ┌───────────────────────┐ ┌──────────┐ ┌────────┐  │
    │  │ /api/v1/cupcakes[/id] │ │ /health  │ │ / web  │  │
    │  └───────────────────────┘ └──────────┘ └────────┘  │
    │                                                     │
    │  Exception Handlers → {"error": "<message>"}        │
    │  Validation/Decode/ID → 400   RecordNotFound → 404* │
    │  CupcakeNotFound → 400        Database → 500        │
    │  (* 404 on GET, 400 on PUT)                         │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Build the Database from settings and connect (probe + create tables)
       Unsupported dialect or unreachable database aborts startup.
    Shutdown:
    1. Dispose the engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from cupcake_store import __version__
from cupcake_store.config import Settings, settings as default_settings
from cupcake_store.database import Database
from cupcake_store.exceptions import (
    CupcakeNotFoundError,
    CupcakeStoreError,
    DatabaseConnectionError,
    DatabaseError,
    DecodeError,
    InvalidIDError,
    RecordNotFoundError,
    UnsupportedDialectError,
    ValidationError,
)
from cupcake_store.middleware.logging import RequestLoggingMiddleware
from cupcake_store.middleware.request_id import RequestIDMiddleware, request_id_var
from cupcake_store.routes import cupcakes, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure the root logger for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, then the Database (unless one was injected).
    Shutdown: dispose the Database this lifespan created.

    A Database passed to create_app() belongs to the caller and is left
    open on shutdown.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("Cupcake Store %s starting up...", __version__)

    owns_database = app.state.database is None
    if owns_database:
        database = None
        try:
            database = Database.from_settings(app_settings)
            await database.connect()
        except (UnsupportedDialectError, DatabaseConnectionError) as e:
            logger.error("Error connecting to database: %s", e.message)
            if database is not None:
                await database.dispose()
            raise
        app.state.database = database

    logger.info("Server ready at http://%s:%d", app_settings.host, app_settings.port)

    yield

    logger.info("Server shutting down...")
    if owns_database:
        await app.state.database.dispose()
        app.state.database = None
    logger.info("Server stopped successfully")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes. Every body is {"error": message}.

        ValidationError (name/flavor/price) → 400
        DecodeError / RequestValidationError → 400 "Error decoding request"
        InvalidIDError                      → 400 "Invalid ID"
        RecordNotFoundError                 → 404 on GET, 400 otherwise
        CupcakeNotFoundError                → 400
        DatabaseError                       → 500 (details logged only)
        HTTPException (405, static 404...)  → its own status
        Exception                           → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_decode_error(request: Request, exc: RequestValidationError):
        logger.warning(
            "[%s] Request decoding failed: %s", request_id_var.get(""), exc.errors()
        )
        return _error_response(400, DecodeError().message)

    @app.exception_handler(DecodeError)
    async def handle_explicit_decode_error(request: Request, exc: DecodeError):
        return _error_response(400, exc.message)

    @app.exception_handler(InvalidIDError)
    async def handle_invalid_id(request: Request, exc: InvalidIDError):
        return _error_response(400, exc.message)

    @app.exception_handler(RecordNotFoundError)
    async def handle_record_not_found(request: Request, exc: RecordNotFoundError):
        # A plain fetch is the only place a missing row is a 404
        if request.method == "GET":
            return _error_response(404, CupcakeNotFoundError().message)
        return _error_response(400, exc.message)

    @app.exception_handler(CupcakeNotFoundError)
    async def handle_cupcake_not_found(request: Request, exc: CupcakeNotFoundError):
        return _error_response(400, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, exc.message)

    @app.exception_handler(CupcakeStoreError)
    async def handle_app_error(request: Request, exc: CupcakeStoreError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(500, "internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

# Checkout root, holding web/ next to the cupcake_store package
PROJECT_ROOT = Path(__file__).resolve().parent.parent


def resolve_static_dir(static_dir: str) -> Optional[Path]:
    """
    Locate the frontend directory.

    A relative STATIC_DIR is looked up in the working directory first, then
    next to the package, so importing the app from elsewhere still finds
    the checkout's web/ folder. Returns None when neither exists.
    """
    directory = Path(static_dir)
    if directory.is_dir():
        return directory
    if not directory.is_absolute():
        fallback = PROJECT_ROOT / directory
        if fallback.is_dir():
            return fallback
    return None


def mount_frontend(app: FastAPI, static_dir: str) -> None:
    """Serve the static frontend at "/" when its directory exists."""
    directory = resolve_static_dir(static_dir)
    if directory is None:
        logger.warning("Static directory %s not found; frontend disabled", static_dir)
        return
    # Mounted last: API routes registered earlier take precedence
    app.mount("/", StaticFiles(directory=directory, html=True), name="web")


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the module-level singleton.
        database: An already connected Database. When omitted, the lifespan
                  builds one from settings on startup.
    """
    app_settings = settings or default_settings

    app = FastAPI(
        title="Cupcake Store API",
        description="CRUD API for the cupcake catalogue.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = database

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Accept", "Authorization", "Content-Type"],
        expose_headers=["Link", "X-Request-ID"],
        max_age=300,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(cupcakes.router)

    mount_frontend(app, app_settings.static_dir)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `cupcake_store.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(
        app,
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
        timeout_keep_alive=default_settings.keep_alive_timeout,
        timeout_graceful_shutdown=default_settings.shutdown_timeout,
    )

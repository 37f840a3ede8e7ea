"""
Guestbook API — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the storage handle and the message service from
       settings, keeps them on `app.state`, registers middleware, exception
       handlers and routers, and returns the app.
Who:   uvicorn (`uvicorn app.main:app --port 5001`) and the test suite, which
       calls create_app() with its own Settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:  GET /   GET /health                       │
    │           GET /messages   POST /messages            │
    │                                                     │
    │  Exception Handlers:                                │
    │  ValidationError→400 │ StorageError→500 │ *→404     │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, optional table creation
    Shutdown: dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import Settings, settings as default_settings
from app.database import Database
from app.exceptions import StorageError, ValidationError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, current_request_id
from app.routes import health, messages
from app.services.message_service import MessageService
from app.services.message_store import OrmMessageStore, StoreFactory

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup sequence:
        1. Setup logging
        2. Validate configuration (logged, not fatal)
        3. Create tables if AUTO_CREATE_TABLES is set

    Shutdown sequence:
        1. Dispose database engine
    """
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Guestbook API %s starting up...", __version__)

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    if app_settings.auto_create_tables:
        await database.create_all()
        logger.info("Database tables ensured")

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Guestbook API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_envelope(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error envelopes.

    Handler mapping:
        ValidationError          → 400, message returned verbatim
        RequestValidationError   → 400 "Invalid request body"
        HTTPException 404 / 405  → 404 "Route not found"
        StorageError             → 500, generic message, context logged
        Exception (fallback)     → 500 "Internal server error", traceback logged

    Responses never contain stack traces, SQL or driver messages.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = current_request_id(request)
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return error_envelope(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = current_request_id(request)
        logger.warning("[%s] Malformed request body: %s", rid, exc.errors())
        return error_envelope(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # Unknown methods on known paths are reported like unknown paths
        if exc.status_code in (404, 405):
            return error_envelope(404, "Route not found")
        return error_envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = current_request_id(request)
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return error_envelope(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = current_request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_envelope(500, "Internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    store_factory: StoreFactory = OrmMessageStore,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings:  Settings to build from; defaults to the environment.
        store_factory: MessageStore implementation handed to MessageService.

    Returns:
        Fully configured FastAPI instance. The Database is constructed here
        (engines connect lazily), so the app serves requests even when the
        lifespan is not run, as under httpx's ASGITransport.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Guestbook API",
        description="Leave a message, read everyone's messages.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.database = Database.from_settings(app_settings)
    app.state.message_service = MessageService(store_factory=store_factory)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(messages.router)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()

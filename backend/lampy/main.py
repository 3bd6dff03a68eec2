"""
LAMPY Backend - FastAPI Application Factory
===========================================

What:  Builds the FastAPI application: settings, database, upload storage,
       middleware, exception handlers and routers.
Who:   uvicorn (`uvicorn lampy.main:app`) and the test suite
       (`create_app(test_settings)`).

Application Architecture:
    ┌──────────────────────────────────────────────────────────────┐
    │                        FastAPI App                           │
    │  app.state.settings      Settings                            │
    │  app.state.database      Database (engine + session factory) │
    │  app.state.file_service  FileService (uploads root)          │
    │                                                              │
    │  Middleware:  RateLimit → RequestID → Logging → GZip → CORS  │
    │                                                              │
    │  {API_PREFIX}/auth  /users  /counsellors  /sessions  /admin  │
    │  /health  /uploads/{path}                                    │
    │                                                              │
    │  Exception handlers:                                         │
    │    LampyError subclasses → their status (400/401/404/409/500)│
    │    RequestValidationError → 400                              │
    │    HTTPException → its status                                │
    │    anything else → 500                                       │
    └──────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, report unsafe settings, create missing
              tables when AUTO_CREATE_TABLES is on.
    Shutdown: dispose the engine.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lampy import __version__
from lampy.config import Settings
from lampy.database import Database
from lampy.exceptions import LampyError
from lampy.middleware.logging import RequestLoggingMiddleware
from lampy.middleware.rate_limit import RateLimitMiddleware
from lampy.middleware.request_id import RequestIDMiddleware, request_id_var
from lampy.routes import admin, auth, counsellors, health, sessions, uploads, users
from lampy.services.file_service import FileService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """Root logger to stdout in a single-line format; quiets chatty libraries."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # lampy.access already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(settings.log_level)
    logger.info("LAMPY backend %s starting up", __version__)

    try:
        settings.validate_for_production()
    except ValueError as e:
        # Keep serving so /health still answers; the operator sees this at startup
        logger.error("%s", str(e))

    if settings.auto_create_tables:
        await database.create_all()

    logger.info("Uploads directory: %s", app.state.file_service.upload_root)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("LAMPY backend shutting down")
    await database.dispose()
    logger.info("Shutdown complete")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(category: str, message: str) -> dict:
    return {
        "error": category,
        "message": message,
        "request_id": request_id_var.get("") or None,
    }


def first_validation_message(exc: RequestValidationError) -> str:
    """
    Turn Pydantic's error list into one readable sentence.

    [{"loc": ("body", "email"), "msg": "value is not a valid email address"}]
    → "email: value is not a valid email address"
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    msg = first.get("msg", "Invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the JSON error body.

    500 bodies never carry internals; the context and traceback are logged.
    """

    @app.exception_handler(LampyError)
    async def handle_lampy_error(request: Request, exc: LampyError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.category, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = first_validation_message(exc)
        logger.info("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return JSONResponse(status_code=400, content=error_body("validation_error", message))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        categories = {401: "unauthorized", 404: "not_found", 405: "method_not_allowed"}
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(categories.get(exc.status_code, "http_error"), str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body("internal_server_error", "An unexpected error occurred"),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Assemble an application around `settings` (read from the environment
    when omitted). Each call gets its own engine and upload root.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="LAMPY API",
        description="Counselling platform backend: accounts, verification, counsellors and session booking.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.file_service = FileService(settings.upload_root, settings.max_upload_size)

    # Added innermost first; RateLimit ends up outermost
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window,
    )

    register_exception_handlers(app)

    for module in (auth, users, counsellors, sessions, admin):
        app.include_router(module.router, prefix=settings.api_prefix)
    app.include_router(health.router)
    app.include_router(uploads.router)

    return app


app = create_app()

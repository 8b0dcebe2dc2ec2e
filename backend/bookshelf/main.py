"""
Bookshelf Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, the error
       responder and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn bookshelf.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Rate Limit  │→│ Req ID   │→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │   /users     │ │  /books  │ │ GET /health     │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Error Responder:                                   │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ BookshelfError → status_for(error_type)      │   │
    │  │ RequestValidationError → 400                 │   │
    │  │ Exception → 500                              │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from bookshelf import __version__
from bookshelf.config import settings
from bookshelf.database import dispose_engine
from bookshelf.exceptions import BookshelfError, ErrorType, is_server_error, status_for
from bookshelf.middleware.logging import RequestLoggingMiddleware
from bookshelf.middleware.rate_limit import RateLimitMiddleware
from bookshelf.middleware.request_id import RequestIDMiddleware, request_id_var
from bookshelf.routes import books, health, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, check configuration.
    Shutdown: dispose the database engine (close all pooled connections).
    """
    setup_logging()
    logger.info("Bookshelf Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: development setups legitimately use the defaults
        logger.warning("Configuration warning: %s", str(e))

    if settings.enable_password_change:
        logger.info("Password change endpoint is enabled")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Bookshelf Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Centralized Error Responder
# ══════════════════════════════════════════════════════════════════════════

def error_body(
    error_type: ErrorType,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "error": error_type.value,
        "message": message,
        "details": details or None,
        "request_id": request_id_var.get(""),
    }


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the handlers that turn every failure into the error envelope.

    Handler hierarchy:
        BookshelfError          → status_for(exc.error_type)
        RequestValidationError  → 400 VALIDATION_ERROR (malformed body/params)
        Exception (fallback)    → 500 SERVER_ERROR

    Security: 5xx responses carry a generic message only. The underlying
    message and context are logged server-side.
    """

    @app.exception_handler(BookshelfError)
    async def handle_bookshelf_error(request: Request, exc: BookshelfError):
        rid = request_id_var.get("")
        status = status_for(exc.error_type)

        # 501 is a known state of the API, not a fault: answer it like a 4xx
        if is_server_error(exc.error_type) and exc.error_type != ErrorType.NOT_IMPLEMENTED:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid, exc.error_type.value, exc.message, exc.context,
            )
            content = error_body(
                exc.error_type,
                "An internal error occurred. Please try again later.",
            )
        else:
            logger.warning("[%s] %s: %s", rid, exc.error_type.value, exc.message)
            content = error_body(exc.error_type, exc.message, exc.context)

        return JSONResponse(status_code=status, content=content)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", rid, errors)
        return JSONResponse(
            status_code=status_for(ErrorType.VALIDATION_ERROR),
            content=error_body(
                ErrorType.VALIDATION_ERROR,
                "Invalid request",
                jsonable_encoder({"errors": errors}),
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=status_for(ErrorType.SERVER_ERROR),
            content=error_body(
                ErrorType.SERVER_ERROR,
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Bookshelf API",
        description="Users and books JSON API.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RateLimit → RequestID → Logging → GZip → CORS
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
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(books.router)
    app.include_router(health.router)

    return app


# uvicorn expects `bookshelf.main:app` to be importable
app = create_app()

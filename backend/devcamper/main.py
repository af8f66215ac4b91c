"""
DevCamper API - FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers.
Who:   uvicorn (`uvicorn devcamper.main:app`) and the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  Rate Limit → Request ID → Logging → CORS   │
    │                                                          │
    │  Routes:      /bootcamps   /courses   /auth   /health    │
    │                                                          │
    │  Errors:      DevCamperError → exc.status_code           │
    │               request validation → 400                   │
    │               anything else → 500 "Server Error"         │
    └──────────────────────────────────────────────────────────┘

Every error response has the same body:
    {"success": false, "error": "<message>"}
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from devcamper import __version__
from devcamper.config import get_settings
from devcamper.database import dispose_engine
from devcamper.exceptions import DevCamperError, RateLimitExceededError, UpstreamError
from devcamper.middleware.logging import RequestLoggingMiddleware
from devcamper.middleware.rate_limit import RateLimitMiddleware
from devcamper.middleware.request_id import RequestIDMiddleware, request_id_var
from devcamper.routes import auth, bootcamps, courses, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once at startup.

    Format: 2024-01-15T12:00:00 [INFO] devcamper.access: GET /bootcamps 200 12.4ms ...
    """
    logging.basicConfig(
        level=getattr(logging, get_settings().log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  logging, configuration check, upload directory.
    Shutdown: dispose the database engine.
    """
    settings = get_settings()
    setup_logging()
    logger.info("=" * 60)
    logger.info("DevCamper API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: listing and health checks work without these values
        logger.error("Configuration error: %s", str(e))

    uploads = Path(settings.file_upload_path)
    uploads.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory: %s", uploads.resolve())
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("DevCamper API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def validation_message(exc: RequestValidationError) -> str:
    """'body.name: Field required, body.careers: ...' style summary of pydantic errors."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = str(error.get("msg", "Invalid value"))
        messages.append(f"{location}: {message}" if location else message)
    return ", ".join(messages) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """
    One responder for every error kind.

    Handler hierarchy:
        DevCamperError          → exc.status_code, exc.message
        RequestValidationError  → 400, joined field messages
        Exception (fallback)    → 500 "Server Error"

    Upstream errors and unexpected exceptions are logged with their context
    server-side; the response only carries the client-safe message.
    """

    @app.exception_handler(DevCamperError)
    async def handle_app_error(request: Request, exc: DevCamperError):
        rid = request_id_var.get()
        if isinstance(exc, UpstreamError):
            logger.error(
                "[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context
            )
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)

        headers = None
        if isinstance(exc, RateLimitExceededError):
            headers = {"Retry-After": str(exc.retry_after)}
        return error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = validation_message(exc)
        logger.info("[%s] Request validation failed: %s", request_id_var.get(), message)
        return error_response(400, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(),
            str(exc),
            exc_info=True,
        )
        return error_response(500, "Server Error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="DevCamper API",
        description=(
            "Bootcamp directory backend: bootcamps, courses and user authentication, "
            "with filtering, field selection, sorting and pagination on list endpoints."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Executed in reverse order of addition: RateLimit → RequestID → Logging → GZip → CORS
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
    app.add_middleware(RateLimitMiddleware, settings=settings)

    register_exception_handlers(app)

    app.include_router(bootcamps.router)
    app.include_router(courses.router)
    app.include_router(auth.router)
    app.include_router(health.router)

    return app


app = create_app()

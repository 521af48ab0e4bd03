"""
Letter Writer Backend — FastAPI Application Factory
=====================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers;
       the lifespan validates configuration and disposes the engine.
Who:   uvicorn (`uvicorn app.main:app`) or the `letter-writer` script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  CORS → Request ID → Access Log        │
    │                                                     │
    │  Routes:                                            │
    │   /api/auth   /api/letters   /api/drive   /health   │
    │                                                     │
    │  Exception Handlers:                                │
    │   LetterWriterError → status from the exception     │
    │   RequestValidationError → 400                      │
    │   Exception → 500                                   │
    └─────────────────────────────────────────────────────┘

Error body (every handler):
    { "error", "message", "details"?, "redirectUrl"?, "request_id" }
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import (
    AuthProviderError,
    CredentialError,
    DatabaseError,
    LetterWriterError,
    RemoteError,
    ServiceUnavailableError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import auth, drive, health, letters

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure stdout logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Level:  LOG_LEVEL. Chatty third-party loggers are held at WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for noisy in (
        "uvicorn.access",
        "sqlalchemy.engine",
        "httpcore",
        "httpx",
        "googleapiclient.discovery_cache",
    ):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, then required-configuration check. A missing Google
    client setting or JWT secret aborts startup; the server never accepts
    requests it cannot authenticate.
    Shutdown: dispose the database engine.
    """
    setup_logging()
    logger.info("Letter Writer backend %s starting (%s)", __version__, settings.environment)

    try:
        settings.validate_required()
    except ValueError as e:
        logger.critical("%s", str(e))
        logger.critical("Set the missing variables and restart the server.")
        raise

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("CORS origins: %s", ", ".join(settings.cors_origins_list))

    yield

    logger.info("Letter Writer backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(
    error: str,
    message: str,
    details: Optional[Any] = None,
    redirect_url: Optional[str] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error, "message": message}
    if details:
        body["details"] = details
    if redirect_url:
        body["redirectUrl"] = redirect_url
    body["request_id"] = request_id_var.get("")
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the JSON error body.

        ValidationError / RequestValidationError  → 400, details = field errors
        AuthProviderError                         → 400 or 401
        CredentialError subclasses                → 401 + redirectUrl
        ServiceUnavailableError                   → 503
        RemoteError                               → 500, upstream text in dev only
        DatabaseError                             → 500, generic message
        other LetterWriterError                   → its status_code
        Exception                                 → 500, details in dev only
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Request validation failed on %s", rid, request.url.path)
        return JSONResponse(
            status_code=400,
            content=error_body(
                "validation_error",
                "Request validation failed",
                details={"errors": jsonable_encoder(exc.errors())},
            ),
        )

    @app.exception_handler(LetterWriterError)
    async def handle_app_error(request: Request, exc: LetterWriterError):
        rid = request_id_var.get("")
        details: Optional[Dict[str, Any]] = None
        redirect_url: Optional[str] = None
        message = exc.message

        if isinstance(exc, ValidationError):
            details = exc.context
        elif isinstance(exc, CredentialError):
            redirect_url = exc.redirect_url or settings.reauth_url
        elif isinstance(exc, (RemoteError, ServiceUnavailableError, AuthProviderError)):
            if settings.is_development:
                details = exc.context
        elif isinstance(exc, DatabaseError):
            message = "An internal error occurred. Please try again later."

        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)

        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.error_code, message, details=details, redirect_url=redirect_url),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("") or getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        details = {"exception": type(exc).__name__, "detail": str(exc)} if settings.is_development else None
        body = error_body(
            "internal_server_error",
            "An unexpected error occurred. Please try again.",
            details=details,
        )
        body["request_id"] = rid
        return JSONResponse(status_code=500, content=body)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Letter Writer API",
        description=(
            "Write letters in the browser, sign in with Google, and export "
            "letters to Google Docs."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Middleware ────────────────────────────────────────────────────────
    # Last added runs first: Request ID → Access Log → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(letters.router)
    app.include_router(drive.router)
    app.include_router(health.router)

    @app.get("/", include_in_schema=False)
    async def root() -> Dict[str, str]:
        return {"message": "Letter Writer API", "version": __version__}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )

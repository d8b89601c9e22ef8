"""
Redline - FastAPI Application
Legal document comparison service.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from redline.core.config import get_settings
from redline.core.utc import utc_now_iso
from redline.routers import comparison


# =============================================================================
# Logging Setup
# =============================================================================

def setup_logging():
    """Configure logging based on settings."""
    from redline.core.logging_config import setup_logging as configure_logging
    settings = get_settings()
    configure_logging(
        level=settings.log_level.upper(),
        json_format=settings.log_json_format,
        log_file=Path(settings.log_file) if settings.log_file else None,
    )


# =============================================================================
# Lifespan (Startup/Shutdown)
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Warm up the comparison engine on startup."""
    settings = get_settings()
    logger = logging.getLogger(__name__)

    engine = comparison.get_engine(settings)
    logger.info(
        "Starting %s v%s (engine v%s, match_threshold=%.2f, near_identical_threshold=%.2f, detect_moves=%s)",
        settings.app_name,
        settings.app_version,
        engine.VERSION,
        settings.match_threshold,
        settings.near_identical_threshold,
        settings.detect_moves,
    )
    yield
    logger.info("Shutting down %s", settings.app_name)


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Application factory.
    Creates and configures the FastAPI application.
    """
    settings = get_settings()
    setup_logging()

    tags_metadata = [
        {
            "name": "Health",
            "description": "Liveness check.",
        },
        {
            "name": "Document Comparison",
            "description": "Compare document versions, render redlines and review changes.",
        },
    ]

    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.enable_docs else None,
        redoc_url="/api/redoc" if settings.enable_docs else None,
        openapi_url="/api/openapi.json" if settings.enable_docs else None,
        openapi_tags=tags_metadata,
    )

    # =========================================================================
    # Middleware
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-Id", str(uuid.uuid4()))
        response = await call_next(request)
        response.headers["X-Request-Id"] = request_id
        return response

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logging.getLogger(__name__).error(
            "Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=True
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    # =========================================================================
    # Register Routers
    # =========================================================================

    app.include_router(comparison.router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {
            "status": "ok",
            "app": settings.app_name,
            "version": settings.app_version,
            "timestamp": utc_now_iso(),
        }

    return app


# Create the app instance
app = create_app()


# =============================================================================
# Development Server
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "redline.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )

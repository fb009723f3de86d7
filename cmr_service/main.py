"""
main.py

This is the main entry point of the FastAPI application.
Here we create the FastAPI app and register all API routes.

This file does NOT contain business logic.
It only wires everything together.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cmr_service import config
from cmr_service.setup_logging import setup_logging
from cmr_service.services.cache import InMemoryResultCache

# Import API routers
from cmr_service.api.health import router as health_router
from cmr_service.api.upload import router as upload_router
from cmr_service.api.analyze import router as analyze_router


def create_app() -> FastAPI:
    """
    Creates and returns the FastAPI application instance.
    This function helps keep the app creation clean and testable.
    """
    setup_logging(config.LOG_LEVEL)

    app = FastAPI(
        title="CMR Invoice Analyzer",
        description="Reads CMR transport documents and invoices into JSON",
        version="1.0.0"
    )

    # Browser clients upload directly
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # One result cache per app, injected into routes (api/dependencies.py)
    app.state.result_cache = InMemoryResultCache(ttl_seconds=config.CACHE_TTL_SECONDS)

    # Register API routes
    app.include_router(health_router, prefix="/health", tags=["Health"])
    app.include_router(upload_router, prefix="/upload", tags=["Upload"])
    app.include_router(analyze_router, prefix="/analyze", tags=["Analyze"])

    @app.get("/", tags=["Health"])
    def index():
        return {
            "ok": True,
            "routes": [
                "/upload",
                "/upload/document-ai",
                "/upload/google-vision",
                "/upload/tesseract",
                "/analyze/text",
                "/health",
            ],
        }

    return app


# Create the FastAPI app instance
app = create_app()

"""
iRequest - Main FastAPI Application

This is the entry point for the FastAPI application.
It configures middleware, routes, and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from .config.settings import settings
from .api.routes import api_router
from .api.middleware import CorrelationIdMiddleware, register_error_handlers
from .domain.enums import StatusKind
from .domain.errors import ConfigurationError
from .repositories.database import create_tables, close_connection, health_check
from .repositories.seed import seed_reference_data
from .repositories.status_registry import get_status_registry
from .utils.logger import setup_logging, get_logger

# Setup logging first
setup_logging()
logger = get_logger(__name__)

APP_VERSION = "1.0.0"


# =============================================================================
# Application Lifecycle
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
        - Creates tables and reference rows (when auto_create_tables is set)
        - Loads the status registry once

    Shutdown:
        - Closes database connections
    """
    logger.info("Starting iRequest...")

    if settings.auto_create_tables:
        try:
            create_tables()
            seed_reference_data()
        except SQLAlchemyError as e:
            logger.error(f"Failed to create tables: {e}")

    try:
        registry = get_status_registry()
        registry.load()
        for kind in StatusKind:
            registry.id_of(kind)
    except ConfigurationError as e:
        logger.error(f"Status registry incomplete: {e.message}")
    except SQLAlchemyError as e:
        logger.error(f"Failed to load status registry: {e}")

    logger.info("Application started successfully")

    yield

    logger.info("Shutting down...")
    close_connection()
    logger.info("Application shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    application = FastAPI(
        title="iRequest",
        description="Internal request / ticket management with approvals and drafts",
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        openapi_url="/api/openapi.json" if settings.debug else None,
    )

    _configure_middleware(application)
    register_error_handlers(application)
    _configure_routes(application)

    return application


def _configure_middleware(app: FastAPI) -> None:
    """Configure application middleware."""
    # Note: allow_credentials must be False when allowing all origins
    allow_all = settings.cors_origins.strip() == "*"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_origins_list,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-Id"],
    )

    app.add_middleware(CorrelationIdMiddleware)


def _configure_routes(app: FastAPI) -> None:
    """Configure application routes."""
    # Same routes twice: /api/... always answers JSON, the bare paths serve browsers
    app.include_router(api_router, prefix="/api")
    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    async def health():
        """
        Health check endpoint.

        Returns application health status including database connectivity.
        """
        db_health = health_check()
        return {
            "status": "healthy" if db_health.get("status") == "healthy" else "degraded",
            "version": APP_VERSION,
            "environment": settings.environment,
            "database": db_health
        }


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()

"""
FastAPI Application Factory.

Usage:
    # Development
    uvicorn api.app:create_app --factory --reload

    # Production
    uvicorn api.app:app --host 0.0.0.0 --port 8080 --workers 4

    # Or use the convenience function
    from api.app import create_app
    app = create_app()
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import get_settings
from core.logging import configure_logging, get_logger
from core.middleware import RequestTracingMiddleware
from filtering.errors import SmartFilterError


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Runs on startup:
    - Initialize logging
    - Load the product catalog

    The gateway client is created lazily on the first smart filter request.
    """
    settings = get_settings()

    configure_logging(
        json_logs=settings.is_production,
        log_level="DEBUG" if settings.debug else "INFO",
    )

    logger.info(
        "Starting smart filter API",
        environment=settings.environment,
        port=settings.port,
        llm_configured=settings.llm_configured,
    )

    from catalog.store import get_catalog
    catalog = get_catalog()
    logger.info("Catalog ready", products=len(catalog))

    yield  # Application is running

    logger.info("Shutting down smart filter API")


async def smart_filter_error_handler(request: Request, exc: SmartFilterError) -> JSONResponse:
    logger.info(
        "Smart filter request rejected",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to process request", "details": str(exc)},
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title="Smart Filter API",
        description="""
        Product catalog filtering for washing machines with natural language queries.

        ## Main Endpoints

        - `/api/filters` - Filterable attributes with counts
        - `/api/products/filter` - Apply a filter state
        - `/api/smart-filter` - Natural language query -> filters
        - `/api/smart-filter/apply` - Query -> filters -> matching products

        ## Health Checks

        - `/health` - Basic health check
        - `/health/detailed` - Detailed health with dependency status
        - `/ready` - Kubernetes readiness probe
        - `/live` - Kubernetes liveness probe
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # =========================================================================
    # Middleware (order matters - first added = outermost)
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request tracing (adds X-Request-ID, logs timing)
    app.add_middleware(RequestTracingMiddleware)

    # =========================================================================
    # Error handlers
    # =========================================================================

    app.add_exception_handler(SmartFilterError, smart_filter_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # =========================================================================
    # Routes
    # =========================================================================

    from api.routes.health import router as health_router
    app.include_router(health_router, tags=["Health"])

    from api.routes.filters import router as filters_router
    app.include_router(filters_router)

    from api.routes.smart_filter import router as smart_filter_router
    app.include_router(smart_filter_router)

    return app


# Create default app instance for uvicorn
# Usage: uvicorn api.app:app
app = create_app()

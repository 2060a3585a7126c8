"""
Health check endpoints.

Provides endpoints for monitoring application health and status.
"""

from typing import Any, Dict

from fastapi import APIRouter

from catalog.store import get_catalog
from config.settings import get_settings
from filtering.gateway import get_filter_gateway


router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        Health status with basic info
    """
    return {
        "status": "healthy",
        "service": "smart-filter-api",
    }


@router.get("/health/detailed")
async def detailed_health_check() -> Dict[str, Any]:
    """
    Detailed health check with dependency status.

    Checks:
    - Configuration loaded
    - Catalog loaded
    - Smart filter model configured (rule-based fallback otherwise)
    """
    settings = get_settings()

    catalog_status = "unknown"
    catalog_error = None
    products = 0
    try:
        products = len(get_catalog())
        catalog_status = "loaded" if products else "empty"
    except Exception as e:
        catalog_status = "error"
        catalog_error = str(e)

    gateway_status = "configured" if get_filter_gateway().enabled else "fallback_only"

    return {
        "status": "healthy" if catalog_status == "loaded" else "degraded",
        "service": "smart-filter-api",
        "environment": settings.environment,
        "checks": {
            "config": "ok",
            "catalog": {
                "status": catalog_status,
                "products": products,
                "error": catalog_error,
            },
            "smart_filter": {
                "status": gateway_status,
                "model": settings.llm_model,
            },
        },
    }


@router.get("/ready")
async def readiness_check() -> Dict[str, str]:
    """
    Kubernetes-style readiness probe.

    Returns 200 if the service is ready to accept traffic.
    """
    if len(get_catalog()) == 0:
        return {"status": "not_ready", "reason": "catalog_empty"}

    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    """
    Kubernetes-style liveness probe.

    Returns 200 if the service is alive.
    """
    return {"status": "alive"}

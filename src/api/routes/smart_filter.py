"""
Smart filter routes: free-text query -> structured filters.

Errors from the smart filter pipeline (rejected input, empty or
low-confidence extraction) are raised as SmartFilterError and rendered by
the application's exception handler as {"error", "suggestion"}.
"""

from fastapi import APIRouter, Depends

from catalog.store import ProductCatalog, get_catalog
from filtering.models import (
    SmartFilterApplyResponse,
    SmartFilterRequest,
    SmartFilterResponse,
)
from filtering.smart_filter import (
    SmartFilterResult,
    SmartFilterService,
    get_smart_filter_service,
)

router = APIRouter(prefix="/api/smart-filter", tags=["Smart Filter"])


def _to_response(result: SmartFilterResult) -> SmartFilterResponse:
    return SmartFilterResponse(
        range_filters=result.response.range_filters,
        standard_filters=result.response.standard_filters,
        confidence=result.response.confidence,
        source=result.source,
    )


@router.post(
    "",
    response_model=SmartFilterResponse,
    response_model_by_alias=True,
    summary="Convert a natural language query into filters",
)
async def smart_filter(
    request: SmartFilterRequest,
    service: SmartFilterService = Depends(get_smart_filter_service),
) -> SmartFilterResponse:
    """
    Resolve a query into filters.

    Uses the language model when configured and falls back to rule-based
    extraction when the model is unavailable or returns unusable output.
    `source` says which path produced the filters.
    """
    result = await service.resolve(request.prompt)
    return _to_response(result)


@router.post(
    "/apply",
    response_model=SmartFilterApplyResponse,
    response_model_by_alias=True,
    summary="Resolve a query and apply it to the catalog",
)
async def smart_filter_apply(
    request: SmartFilterRequest,
    service: SmartFilterService = Depends(get_smart_filter_service),
    catalog: ProductCatalog = Depends(get_catalog),
) -> SmartFilterApplyResponse:
    """The resolved filters replace any previous selection."""
    result, application = await service.resolve_and_apply(request.prompt, catalog.products)
    return SmartFilterApplyResponse(
        filters=_to_response(result),
        applied_filters=application.state,
        products=application.matches,
        total=len(catalog),
        matched=len(application.matches),
    )

"""
Catalog and manual filter routes.

The applied filter state lives with the client; every request carries the
full state and gets back the products it matches.
"""

from typing import List

from fastapi import APIRouter, Depends

from catalog.store import ProductCatalog, get_catalog
from core.logging import get_logger
from filtering.models import (
    AppliedFilterState,
    AttributeDescriptor,
    FilteredProductsResponse,
    Product,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Filters"])


@router.get(
    "/filters",
    response_model=List[AttributeDescriptor],
    response_model_by_alias=True,
    response_model_exclude_none=True,
    summary="Filterable attributes with counts over the catalog",
)
async def available_filters(
    catalog: ProductCatalog = Depends(get_catalog),
) -> List[AttributeDescriptor]:
    return catalog.available_filters()


@router.get(
    "/products",
    response_model=List[Product],
    response_model_by_alias=True,
    summary="Full catalog in stable order",
)
async def list_products(
    catalog: ProductCatalog = Depends(get_catalog),
) -> List[Product]:
    return catalog.products


@router.post(
    "/products/filter",
    response_model=FilteredProductsResponse,
    response_model_by_alias=True,
    summary="Apply a filter state to the catalog",
)
async def filter_products(
    state: AppliedFilterState,
    catalog: ProductCatalog = Depends(get_catalog),
) -> FilteredProductsResponse:
    matches = catalog.filter(state)
    logger.debug(
        "Manual filter applied",
        active_filters=state.active_count,
        matched=len(matches),
    )
    return FilteredProductsResponse(
        products=matches,
        total=len(catalog),
        matched=len(matches),
        active_filters=state.active_count,
    )

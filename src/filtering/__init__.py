"""
Smart Filter Module: schema-driven product filtering for washing machines.

Provides:
- Attribute schema: every filterable attribute and its legal values
- FallbackExtractor: rule-based text -> filters
- normalize_filter_response: repair model output against the schema
- apply_filters: evaluate an applied filter state over products
- FilterGateway: LLM text -> filters with retry
- SmartFilterService: validation, AI path, fallback
"""

from filtering.fallback_extractor import FallbackExtractor, extract_filters
from filtering.filter_engine import apply_filters, count_matches
from filtering.gateway import FilterGateway, get_filter_gateway
from filtering.models import AppliedFilterState, FilterResponse, Product
from filtering.normalizer import normalize_filter_response
from filtering.schema import get_descriptor, list_descriptors
from filtering.smart_filter import (
    SmartFilterService,
    get_smart_filter_service,
    normalize_and_apply,
)

__all__ = [
    "AppliedFilterState",
    "FallbackExtractor",
    "FilterGateway",
    "FilterResponse",
    "Product",
    "SmartFilterService",
    "apply_filters",
    "count_matches",
    "extract_filters",
    "get_descriptor",
    "get_filter_gateway",
    "get_smart_filter_service",
    "list_descriptors",
    "normalize_and_apply",
    "normalize_filter_response",
]

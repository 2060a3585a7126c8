"""
Smart filter orchestration.

    query -> validate_query -> FilterGateway (retries) -> quality gates
          -> normalize_filter_response -> FilterResponse (source="ai")

    gateway unavailable / malformed output
          -> FallbackExtractor -> FilterResponse (source="fallback")

normalize_and_apply() turns any external response into the replacement
filter state plus the products it matches.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from config.constants import DEFAULT_SMART_FILTER_CONFIG, SmartFilterConfig
from core.logging import get_logger
from filtering.errors import EmptyExtraction, GatewayUnavailable
from filtering.fallback_extractor import FallbackExtractor
from filtering.filter_engine import apply_filters
from filtering.gateway import FilterGateway, get_filter_gateway
from filtering.models import (
    AppliedFilterState,
    FilterResponse,
    Product,
    RawFilterResponse,
)
from filtering.normalizer import normalize_filter_response
from filtering.query_validation import (
    EXAMPLES_SUGGESTION,
    check_response_quality,
    validate_query,
)
from filtering.schema import list_descriptors

logger = get_logger(__name__)

SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"


@dataclass(frozen=True)
class SmartFilterResult:
    response: FilterResponse
    source: str


@dataclass(frozen=True)
class FilterApplication:
    matches: List[Product]
    state: AppliedFilterState


def normalize_and_apply(
    raw: Union[RawFilterResponse, FilterResponse, Mapping[str, Any]],
    products: Sequence[Product],
    current_state: Optional[AppliedFilterState] = None,
) -> FilterApplication:
    """
    Normalize an external response and apply it.

    The new state replaces current_state wholesale; nothing is merged.
    """
    response = normalize_filter_response(raw)
    state = AppliedFilterState.from_response(response)
    matches = apply_filters(products, state)
    logger.debug(
        "Applied filter state replaced",
        previous_filters=current_state.active_count if current_state else 0,
        active_filters=state.active_count,
        matched=len(matches),
    )
    return FilterApplication(matches=matches, state=state)


class SmartFilterService:
    """Resolves free-text queries into filters, preferring the model over rules."""

    def __init__(
        self,
        gateway: Optional[FilterGateway] = None,
        extractor: Optional[FallbackExtractor] = None,
        config: SmartFilterConfig = DEFAULT_SMART_FILTER_CONFIG,
    ):
        self._gateway = gateway
        self._extractor = extractor or FallbackExtractor()
        self._config = config

    @property
    def gateway(self) -> FilterGateway:
        if self._gateway is None:
            self._gateway = get_filter_gateway()
        return self._gateway

    async def resolve(self, query: str) -> SmartFilterResult:
        """
        Raises:
            InputRejected: query failed pre-validation (no gateway call is made)
            EmptyExtraction: nothing could be extracted
            LowConfidence: the model answered below the confidence threshold
        """
        validate_query(query, self._config)

        try:
            raw = await self.gateway.request_filters(query, list_descriptors())
        except GatewayUnavailable as e:
            logger.warning(
                "AI path unavailable, using rule-based extraction",
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._fallback(query)

        check_response_quality(raw, self._config)
        response = normalize_filter_response(raw)

        logger.info(
            "Smart filter resolved",
            source=SOURCE_AI,
            range_filters=len(response.range_filters),
            standard_filters=len(response.standard_filters),
            confidence=response.confidence,
        )
        return SmartFilterResult(response=response, source=SOURCE_AI)

    async def resolve_and_apply(
        self,
        query: str,
        products: Sequence[Product],
        current_state: Optional[AppliedFilterState] = None,
    ) -> Tuple[SmartFilterResult, FilterApplication]:
        result = await self.resolve(query)
        return result, normalize_and_apply(result.response, products, current_state)

    def _fallback(self, query: str) -> SmartFilterResult:
        response = self._extractor.extract(query)
        if response.is_empty:
            raise EmptyExtraction(
                "Could not process your query. Please try again with clearer terms.",
                suggestion=EXAMPLES_SUGGESTION,
            )
        logger.info(
            "Smart filter resolved",
            source=SOURCE_FALLBACK,
            range_filters=len(response.range_filters),
            standard_filters=len(response.standard_filters),
            confidence=response.confidence,
        )
        return SmartFilterResult(response=response, source=SOURCE_FALLBACK)


_service: Optional[SmartFilterService] = None


def get_smart_filter_service() -> SmartFilterService:
    """Get or create the SmartFilterService singleton."""
    global _service
    if _service is None:
        _service = SmartFilterService()
    return _service

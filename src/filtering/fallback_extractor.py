"""
Rule-based filter extraction.

Used when the language model is unavailable, failing, or returns something
we cannot parse. Every rule is a fixed pattern over the lowercased query, so
the result depends only on the text and runs in time independent of the
catalog. Rules are independent and several may fire for one query.

Price bounds are the exception: "under", "over" and "around" are tried in
that order and only the first class that matches contributes a filter.
"""

import re
from typing import List, Optional, Tuple, Union

from config.constants import DEFAULT_FALLBACK_RULES, FallbackRulesConfig
from core.logging import get_logger
from filtering.models import (
    FilterOperator,
    FilterResponse,
    FilterValueType,
    RangeFilter,
    StandardFilter,
)

logger = get_logger(__name__)


# ============================================================================
# Price bounds
# ============================================================================

_AMOUNT = r"\s*\$?\s*(\d[\d,]*(?:\.\d+)?)"

_PRICE_UNDER = re.compile(r"(?:under|below|less than|<)" + _AMOUNT)
_PRICE_OVER = re.compile(r"(?:over|above|more than|>)" + _AMOUNT)
_PRICE_AROUND = re.compile(r"(?:around|about|approximately)" + _AMOUNT)


def _parse_amount(raw: str) -> float:
    return float(raw.replace(",", ""))


# ============================================================================
# Keyword rules
# ============================================================================

def _flag(attribute: str) -> StandardFilter:
    return StandardFilter(
        attribute=attribute,
        operator=FilterOperator.AND,
        value_type=FilterValueType.SINGLE,
        values=("true",),
    )


def _tier(value: str) -> StandardFilter:
    return StandardFilter(
        attribute="priceTier",
        operator=FilterOperator.OR,
        value_type=FilterValueType.SINGLE,
        values=(value,),
    )


KeywordRule = Tuple[re.Pattern, Union[RangeFilter, StandardFilter]]


def _build_keyword_rules(config: FallbackRulesConfig) -> Tuple[KeywordRule, ...]:
    """Ordered (pattern, filter) pairs; a match appends the filter to its list."""
    return (
        # Price tier (whole words only, so "inexpensive" is not "expensive")
        (re.compile(r"\b(?:budget|cheap|affordable|inexpensive)\b"), _tier("BUDGET")),
        (re.compile(r"\b(?:premium|high-end|expensive)\b"), _tier("PREMIUM")),
        (re.compile(r"\b(?:luxury|top-of-the-line)\b"), _tier("LUXURY")),

        # Household size
        (
            re.compile(r"small family|2-3 people|couple"),
            RangeFilter(
                attribute="specifications.capacity",
                min_value=config.SMALL_FAMILY_CAPACITY_MIN,
                max_value=config.SMALL_FAMILY_CAPACITY_MAX,
            ),
        ),
        (
            re.compile(r"big family|large family|4\+ people|family of \d+"),
            RangeFilter(
                attribute="specifications.capacity",
                min_value=config.LARGE_FAMILY_CAPACITY_MIN,
            ),
        ),

        # Features
        (re.compile(r"wi-?fi|smart|connected"), _flag("features.wifiEnabled")),
        (
            re.compile(r"energy[- ]efficient|eco[- ]friendly|energy star"),
            StandardFilter(
                attribute="specifications.energyRating",
                operator=FilterOperator.OR,
                value_type=FilterValueType.MULTI,
                values=("A_PLUS_PLUS", "A_PLUS_PLUS_PLUS"),
            ),
        ),
        (
            re.compile(r"quiet|silent|low noise"),
            RangeFilter(
                attribute="specifications.noiseLevel",
                max_value=config.QUIET_NOISE_MAX,
            ),
        ),
        (re.compile(r"steam"), _flag("features.steamCleaning")),
        (re.compile(r"allergen|allergy"), _flag("features.allergenCycle")),
        (re.compile(r"sanitize|antibacterial"), _flag("features.sanitizeCycle")),
    )


class FallbackExtractor:
    """Deterministic text-to-filter conversion from fixed pattern rules."""

    def __init__(self, config: FallbackRulesConfig = DEFAULT_FALLBACK_RULES):
        self._config = config
        self._rules = _build_keyword_rules(config)

    def extract(self, text: str) -> FilterResponse:
        """
        Derive filters from free text.

        An empty result means nothing could be extracted; the caller decides
        how to report that.
        """
        query = text.lower()
        range_filters: List[RangeFilter] = []
        standard_filters: List[StandardFilter] = []

        price = self._price_filter(query)
        if price is not None:
            range_filters.append(price)

        for pattern, extracted in self._rules:
            if not pattern.search(query):
                continue
            if isinstance(extracted, RangeFilter):
                range_filters.append(extracted)
            else:
                standard_filters.append(extracted)

        response = FilterResponse(
            range_filters=tuple(range_filters),
            standard_filters=tuple(standard_filters),
            confidence=self._config.CONFIDENCE,
        )
        logger.debug(
            "Rule-based extraction",
            query=text,
            range_filters=len(response.range_filters),
            standard_filters=len(response.standard_filters),
        )
        return response

    def _price_filter(self, query: str) -> Optional[RangeFilter]:
        match = _PRICE_UNDER.search(query)
        if match:
            return RangeFilter(attribute="price", max_value=_parse_amount(match.group(1)))

        match = _PRICE_OVER.search(query)
        if match:
            return RangeFilter(attribute="price", min_value=_parse_amount(match.group(1)))

        match = _PRICE_AROUND.search(query)
        if match:
            amount = _parse_amount(match.group(1))
            spread = self._config.AROUND_PRICE_SPREAD
            return RangeFilter(attribute="price", min_value=amount - spread, max_value=amount + spread)

        return None


_extractor = FallbackExtractor()


def extract_filters(text: str) -> FilterResponse:
    """Module-level shortcut using the default rules."""
    return _extractor.extract(text)

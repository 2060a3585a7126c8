"""
Cheap gates around the AI path.

validate_query() runs before any gateway call and rejects empty, oversized
or clearly off-topic input. check_response_quality() runs on a successful
gateway answer and rejects empty or low-confidence results. Neither is a
correctness filter; they only decide whether a query is worth handling.
"""

import re
from typing import Union

from config.constants import DEFAULT_SMART_FILTER_CONFIG, SmartFilterConfig
from core.logging import get_logger
from filtering.errors import EmptyExtraction, InputRejected, LowConfidence
from filtering.models import FilterResponse, RawFilterResponse

logger = get_logger(__name__)


# Substring matches against the lowercased query
DOMAIN_KEYWORDS = (
    # Size / household
    "small", "big", "large", "compact", "family", "people", "apartment", "space",
    # Price
    "budget", "cheap", "affordable", "expensive", "premium", "luxury",
    "under", "over", "around", "below", "above", "$", "dollar", "price",
    # Features
    "wifi", "smart", "energy", "efficient", "eco", "green", "quiet", "silent",
    "steam", "allergen", "sanitize", "wash", "clean", "cycle",
    # Specifications
    "capacity", "noise", "spin", "speed", "rating", "drum", "motor",
    # Brands
    "kitchentech", "homepro", "appliance", "cookmaster", "homemate",
    # Product types
    "washer", "washing", "machine", "laundry",
)

KEYWORD_SUGGESTION = (
    "Try using terms like: small family, big family, energy efficient, "
    "budget, premium, WiFi, quiet, steam cleaning"
)
REPHRASE_SUGGESTION = (
    'Try using clearer terms like: "small family under $800", '
    '"energy efficient", "premium WiFi enabled"'
)
EXAMPLES_SUGGESTION = (
    'Examples: "small family", "budget friendly", "energy efficient with WiFi"'
)

_DIGIT = re.compile(r"\d")


def is_domain_query(text: str, config: SmartFilterConfig = DEFAULT_SMART_FILTER_CONFIG) -> bool:
    lowered = text.lower()
    if any(keyword in lowered for keyword in DOMAIN_KEYWORDS):
        return True
    return bool(_DIGIT.search(text)) and len(lowered) < config.SHORT_NUMERIC_QUERY_LENGTH


def validate_query(text: str, config: SmartFilterConfig = DEFAULT_SMART_FILTER_CONFIG) -> str:
    """
    Pre-validation gate. Returns the query unchanged or raises InputRejected.
    """
    if not isinstance(text, str) or not text.strip():
        raise InputRejected("Prompt is required and must be a non-empty string")

    if len(text) > config.MAX_QUERY_LENGTH:
        raise InputRejected(
            f"Prompt is too long (max {config.MAX_QUERY_LENGTH} characters)"
        )

    if not is_domain_query(text, config):
        logger.info("Query rejected by pre-validation", query=text)
        raise InputRejected(
            "I couldn't find any washing machine-related terms in your query.",
            suggestion=KEYWORD_SUGGESTION,
        )

    return text


def check_response_quality(
    response: Union[RawFilterResponse, FilterResponse],
    config: SmartFilterConfig = DEFAULT_SMART_FILTER_CONFIG,
) -> None:
    """Reject a gateway answer with no filters or a confidence below threshold."""
    if response.is_empty:
        logger.info("Gateway returned no filters")
        raise EmptyExtraction(
            "Could not understand your query. Please try describing what you are looking for.",
            suggestion=(
                "Try using terms like: budget, premium, small family, big family, "
                "energy efficient, WiFi, quiet"
            ),
        )

    if response.confidence is not None and response.confidence < config.MIN_CONFIDENCE:
        logger.info("Gateway confidence below threshold", confidence=response.confidence)
        raise LowConfidence(
            "I'm not confident I understood your query correctly. Could you try rephrasing?",
            suggestion=REPHRASE_SUGGESTION,
        )

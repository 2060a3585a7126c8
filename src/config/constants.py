"""
Application constants for smart filtering.

These are values that don't change based on environment but may need
to be tuned or referenced across the codebase.
"""

from dataclasses import dataclass


# =============================================================================
# Smart Filter Configuration
# =============================================================================

@dataclass(frozen=True)
class SmartFilterConfig:
    """Thresholds for query validation and response quality gates."""

    # Pre-validation
    MAX_QUERY_LENGTH: int = 500
    # Queries without any domain keyword pass only if they carry a digit
    # and are shorter than this
    SHORT_NUMERIC_QUERY_LENGTH: int = 50

    # Responses below this confidence are rejected
    MIN_CONFIDENCE: float = 0.3


DEFAULT_SMART_FILTER_CONFIG = SmartFilterConfig()


# =============================================================================
# Rule-based Extraction
# =============================================================================

@dataclass(frozen=True)
class FallbackRulesConfig:
    """Constants used by the rule-based extractor."""

    # Below the typical AI confidence to signal lower trust
    CONFIDENCE: float = 0.5

    # "around $N" -> [N - spread, N + spread]
    AROUND_PRICE_SPREAD: int = 200

    SMALL_FAMILY_CAPACITY_MIN: float = 4.0
    SMALL_FAMILY_CAPACITY_MAX: float = 4.5
    LARGE_FAMILY_CAPACITY_MIN: float = 5.0

    # dB ceiling for "quiet"
    QUIET_NOISE_MAX: int = 60


DEFAULT_FALLBACK_RULES = FallbackRulesConfig()

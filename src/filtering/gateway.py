"""
LLM gateway: natural language query -> loosely-structured filter response.

Calls an OpenAI-compatible chat endpoint (the Hugging Face router by
default) with the attribute schema and mapping rules, then digs the first
balanced JSON object out of the reply. Model output is treated as
untrusted text: it may be wrapped in markdown fences, surrounded by prose,
or not JSON at all.

Each call is retried a fixed number of times with exponential backoff.
Retries are sequential. When every attempt fails the caller gets
GatewayUnavailable (or MalformedGatewayOutput) and is expected to fall back
to rule-based extraction.
"""

import asyncio
import json
import re
import time
from typing import Optional, Sequence

from pydantic import ValidationError

from config.settings import Settings, get_settings
from core.logging import get_logger
from filtering.errors import GatewayUnavailable, MalformedGatewayOutput
from filtering.models import AttributeDescriptor, RawFilterResponse
from filtering.schema import list_descriptors

logger = get_logger(__name__)


# =============================================================================
# Prompt
# =============================================================================

_SYSTEM_PROMPT = """You are a product filter assistant for a washing machine store. Convert user queries into structured filter JSON.

BUSINESS RULES - CAPACITY MAPPING:
- "small family" OR "2-3 people" -> specifications.capacity: 4.0-4.5 cu ft
- "big family" OR "large family" OR "4+ people" -> specifications.capacity: 5.0+ cu ft
- "apartment" OR "compact" -> specifications.capacity: 3.5-4.2 cu ft
- "family sized" -> specifications.capacity: 4.5+ cu ft

BUSINESS RULES - PRICE MAPPING:
- "under $X" OR "below $X" OR "less than $X" -> price maxValue: X
- "above $X" OR "over $X" OR "more than $X" -> price minValue: X
- "around $X" OR "about $X" -> price minValue: X-200, maxValue: X+200
- "budget" -> priceTier: BUDGET
- "affordable" -> priceTier: BUDGET or MID_RANGE
- "premium" OR "high-end" -> priceTier: PREMIUM
- "luxury" -> priceTier: LUXURY

BUSINESS RULES - FEATURES:
- "energy efficient" OR "eco-friendly" -> specifications.energyRating: A_PLUS_PLUS or A_PLUS_PLUS_PLUS
- "WiFi" OR "smart" OR "connected" -> features.wifiEnabled: true
- "quiet" OR "silent" -> specifications.noiseLevel: maxValue 60
- "steam" -> features.steamCleaning: true
- "allergen" OR "allergy" -> features.allergenCycle: true
- "sanitize" OR "antibacterial" -> features.sanitizeCycle: true

ATTRIBUTE PATHS (IMPORTANT):
- Use the exact "attribute" values from AVAILABLE FILTERS
- Specifications are nested: "specifications.capacity", "specifications.energyRating"
- Features are nested: "features.wifiEnabled", "features.steamCleaning"
- RANGE attributes go in rangeFilters, STANDARD attributes go in standardFilters
- Boolean features use operator "AND" with values ["true"]

OUTPUT FORMAT (JSON ONLY):
{
  "rangeFilters": [
    { "attribute": "price", "minValue": 500, "maxValue": 1000 }
  ],
  "standardFilters": [
    { "attribute": "priceTier", "operator": "OR", "valueType": "SINGLE", "values": ["BUDGET"] },
    { "attribute": "features.wifiEnabled", "operator": "AND", "valueType": "SINGLE", "values": ["true"] }
  ],
  "confidence": 0.85
}

"confidence" is 0.0-1.0: how sure you are that the filters capture the query.

IMPORTANT: Return ONLY the JSON object. No markdown, no explanation."""


def build_user_prompt(query: str, descriptors: Sequence[AttributeDescriptor]) -> str:
    """User message: the schema the model must map onto, then the query."""
    schema = json.dumps(
        [d.model_dump(by_alias=True, exclude_none=True, mode="json") for d in descriptors],
        indent=2,
    )
    return f"AVAILABLE FILTERS:\n{schema}\n\nUSER QUERY: \"{query}\""


# =============================================================================
# Output parsing
# =============================================================================

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def extract_json_object(text: str) -> str:
    """
    Return the first balanced {...} span after removing markdown fences.

    Braces inside JSON strings are ignored when balancing.
    """
    cleaned = _CODE_FENCE.sub("", text)
    start = cleaned.find("{")
    if start == -1:
        raise MalformedGatewayOutput("No JSON object found in model output")

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(cleaned)):
        char = cleaned[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return cleaned[start:index + 1]

    raise MalformedGatewayOutput("Unbalanced JSON object in model output")


def parse_gateway_output(text: str) -> RawFilterResponse:
    """Structural parse of model text into a RawFilterResponse."""
    span = extract_json_object(text)
    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise MalformedGatewayOutput(f"Invalid JSON in model output: {e}") from e

    if not isinstance(data, dict):
        raise MalformedGatewayOutput("Model output is not a JSON object")

    try:
        return RawFilterResponse.model_validate(data)
    except ValidationError as e:
        raise MalformedGatewayOutput(
            f"Model output does not match the filter response shape: {e.error_count()} errors"
        ) from e


# =============================================================================
# Gateway
# =============================================================================

class FilterGateway:
    """Async client for the text-to-filter model."""

    def __init__(self, settings: Optional[Settings] = None, client=None):
        settings = settings or get_settings()
        self._client = client
        self._api_key = settings.huggingface_api_key
        self._base_url = settings.llm_base_url
        self._model = settings.llm_model
        self._timeout = settings.llm_timeout_seconds
        self._max_retries = settings.llm_max_retries
        self._base_delay = settings.llm_retry_base_delay_seconds
        self._max_tokens = settings.llm_max_new_tokens
        self._temperature = settings.llm_temperature
        self._enabled = settings.smart_filter_enabled and (bool(self._api_key) or client is not None)

    @property
    def client(self):
        """Lazy-load the OpenAI-compatible client."""
        if self._client is None:
            from openai import AsyncOpenAI
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                # Retries are handled by request_filters()
                max_retries=0,
            )
        return self._client

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def attempts(self) -> int:
        return self._max_retries + 1

    async def ask(self, query: str, descriptors: Sequence[AttributeDescriptor]) -> str:
        """One round trip to the model. Returns the raw completion text."""
        try:
            response = await self.client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": build_user_prompt(query, descriptors)},
                ],
                temperature=self._temperature,
                top_p=0.95,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            raise GatewayUnavailable(f"Gateway call failed: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise MalformedGatewayOutput("Gateway returned an empty response")
        return response.choices[0].message.content

    async def request_filters(
        self,
        query: str,
        descriptors: Optional[Sequence[AttributeDescriptor]] = None,
    ) -> RawFilterResponse:
        """
        Ask the model for filters, retrying with exponential backoff.

        Raises:
            GatewayUnavailable: not configured, or every attempt failed
                (MalformedGatewayOutput when the last failure was a parse error)
        """
        if not self._enabled:
            raise GatewayUnavailable("Smart filter model is not configured")

        descriptors = descriptors if descriptors is not None else list_descriptors()
        last_error: Optional[GatewayUnavailable] = None

        for attempt in range(self.attempts):
            t_start = time.time()
            try:
                raw = await self.ask(query, descriptors)
                parsed = parse_gateway_output(raw)
                logger.info(
                    "Gateway returned filters",
                    query=query,
                    attempt=attempt + 1,
                    range_filters=len(parsed.range_filters),
                    standard_filters=len(parsed.standard_filters),
                    confidence=parsed.confidence,
                    latency_ms=int((time.time() - t_start) * 1000),
                )
                return parsed
            except GatewayUnavailable as e:
                last_error = e
                logger.warning(
                    "Gateway attempt failed",
                    attempt=attempt + 1,
                    attempts=self.attempts,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                if attempt + 1 < self.attempts:
                    await asyncio.sleep(self._base_delay * (2 ** attempt))

        raise last_error


# =============================================================================
# Singleton
# =============================================================================

_gateway: Optional[FilterGateway] = None


def get_filter_gateway() -> FilterGateway:
    """Get or create the FilterGateway singleton."""
    global _gateway
    if _gateway is None:
        _gateway = FilterGateway()
    return _gateway

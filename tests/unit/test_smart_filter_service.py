"""
Unit tests for SmartFilterService: validation, AI path, fallback, apply.

The gateway is mocked; no network calls are made.

Run with: PYTHONPATH=src python -m pytest tests/unit/test_smart_filter_service.py -v
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from filtering.errors import (
    EmptyExtraction,
    GatewayUnavailable,
    InputRejected,
    LowConfidence,
    MalformedGatewayOutput,
)
from filtering.models import AppliedFilterState, RawFilterResponse
from filtering.smart_filter import SmartFilterService, normalize_and_apply


@pytest.fixture
def mock_gateway():
    gateway = MagicMock()
    gateway.request_filters = AsyncMock()
    return gateway


@pytest.fixture
def service(mock_gateway):
    return SmartFilterService(gateway=mock_gateway)


def _raw(payload):
    return RawFilterResponse.model_validate(payload)


# =============================================================================
# Pre-validation
# =============================================================================

class TestPreValidation:

    async def test_long_query_rejected_before_gateway(self, service, mock_gateway):
        query = "washer " + "x" * 494

        with pytest.raises(InputRejected):
            await service.resolve(query)

        mock_gateway.request_filters.assert_not_called()

    async def test_off_topic_rejected_before_gateway(self, service, mock_gateway):
        with pytest.raises(InputRejected):
            await service.resolve("tell me a joke")

        mock_gateway.request_filters.assert_not_called()


# =============================================================================
# AI path
# =============================================================================

class TestAIPath:

    async def test_normalized_ai_response(self, service, mock_gateway):
        mock_gateway.request_filters.return_value = _raw({
            "rangeFilters": [
                {"attribute": "price", "maxValue": 1500},
                {"attribute": "energyRating", "values": ["A_PLUS_PLUS"]},
            ],
            "standardFilters": [{"attribute": "wifiEnabled", "operator": "AND", "values": ["true"]}],
            "confidence": 0.8,
        })

        result = await service.resolve("energy efficient wifi washer under $1500")

        assert result.source == "ai"
        assert [rf.attribute for rf in result.response.range_filters] == ["price"]
        assert [sf.attribute for sf in result.response.standard_filters] == [
            "features.wifiEnabled",
            "specifications.energyRating",
        ]
        assert result.response.confidence == 0.8

    async def test_low_confidence_surfaces(self, service, mock_gateway):
        mock_gateway.request_filters.return_value = _raw({
            "standardFilters": [{"attribute": "priceTier", "values": ["BUDGET"]}],
            "confidence": 0.1,
        })

        with pytest.raises(LowConfidence):
            await service.resolve("budget washer")

    async def test_empty_ai_response_surfaces(self, service, mock_gateway):
        mock_gateway.request_filters.return_value = _raw({"confidence": 0.9})

        with pytest.raises(EmptyExtraction):
            await service.resolve("budget washer")


# =============================================================================
# Fallback path
# =============================================================================

class TestFallback:

    @pytest.mark.parametrize("error", [
        GatewayUnavailable("Gateway call failed: 503"),
        MalformedGatewayOutput("No JSON object found in model output"),
    ])
    async def test_gateway_failure_uses_rules(self, service, mock_gateway, error):
        mock_gateway.request_filters.side_effect = error

        result = await service.resolve("small family under $800")

        assert result.source == "fallback"
        assert [(rf.attribute, rf.min_value, rf.max_value) for rf in result.response.range_filters] == [
            ("price", None, 800),
            ("specifications.capacity", 4.0, 4.5),
        ]
        assert result.response.confidence == 0.5

    async def test_out_of_range_confidence_uses_rules(self, gateway, mock_llm_client):
        content = json.dumps({
            "rangeFilters": [{"attribute": "price", "maxValue": 800}],
            "standardFilters": [],
            "confidence": 85,
        })
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = content
        mock_llm_client.chat.completions.create.return_value = response

        result = await SmartFilterService(gateway=gateway).resolve("small family under $800")

        assert result.source == "fallback"
        assert result.response.confidence == 0.5
        assert mock_llm_client.chat.completions.create.await_count == 3

    async def test_fallback_with_nothing_extracted(self, service, mock_gateway):
        mock_gateway.request_filters.side_effect = GatewayUnavailable("down")

        with pytest.raises(EmptyExtraction) as exc_info:
            await service.resolve("washing machine")

        assert "Examples" in exc_info.value.suggestion

    async def test_disabled_gateway_falls_back(self, disabled_gateway):
        service = SmartFilterService(gateway=disabled_gateway)

        result = await service.resolve("budget friendly")

        assert result.source == "fallback"
        assert result.response.standard_filters[0].values == ("BUDGET",)


# =============================================================================
# Apply
# =============================================================================

class TestNormalizeAndApply:

    def test_apply_replaces_state(self, sample_products):
        previous = AppliedFilterState.empty().with_value_toggled("brand", "HOMEMATE")

        application = normalize_and_apply(
            {"rangeFilters": [{"attribute": "capacity", "minValue": 5.0}]},
            sample_products,
            previous,
        )

        assert "brand" not in application.state.standard_filters
        assert [p.id for p in application.matches] == ["WM_0004", "WM_0005"]

    def test_apply_empty_response_matches_everything(self, sample_products):
        application = normalize_and_apply({"rangeFilters": [], "standardFilters": []}, sample_products)
        assert len(application.matches) == len(sample_products)
        assert application.state.is_empty

    def test_reclassified_range_without_values_is_inactive(self, sample_products):
        # A boolean flag sent as a range carries no "true" selection
        application = normalize_and_apply(
            {"rangeFilters": [{"attribute": "wifiEnabled", "minValue": 1}]},
            sample_products,
        )

        assert application.state.active_count == 0
        assert application.state.is_empty
        assert len(application.matches) == len(sample_products)

    async def test_resolve_and_apply(self, service, mock_gateway, sample_products):
        mock_gateway.request_filters.side_effect = GatewayUnavailable("down")

        result, application = await service.resolve_and_apply("quiet washer with steam", sample_products)

        assert result.source == "fallback"
        assert [p.id for p in application.matches] == ["WM_0003", "WM_0005"]

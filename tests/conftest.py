"""
Pytest configuration and shared fixtures for the smart filter tests.
"""
import os
import sys
from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

# Load environment variables
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))


# ============================================================================
# Fixtures: Test Data Factories
# ============================================================================

def make_product(
    product_id: str = "WM_0001",
    brand: str = "HOMEPRO",
    color: str = "WHITE",
    amount: float = 899,
    tier: str = "BUDGET",
    capacity: float = 4.2,
    energy_rating: str = "A",
    noise_level: int = 66,
    spin_speed: int = 1200,
    **features,
):
    """Build a Product with sensible defaults; feature flags as snake_case kwargs."""
    from filtering.models import Product

    return Product.model_validate({
        "id": product_id,
        "brand": brand,
        "color": color,
        "price": {"displayPrice": {"amount": amount, "currency": "USD"}},
        "priceTier": tier,
        "specifications": {
            "capacity": capacity,
            "energyRating": energy_rating,
            "noiseLevel": noise_level,
            "spinSpeed": spin_speed,
            "width": 27,
            "height": 39,
            "depth": 31,
            "weight": 200,
        },
        "features": features,
        "description": f"Test washer {product_id}",
    })


@pytest.fixture
def product_factory():
    """Factory fixture for building Product instances."""
    return make_product


@pytest.fixture
def sample_products() -> List:
    """Small hand-built catalog covering every tier."""
    return [
        make_product("WM_0001", "HOMEPRO", "WHITE", 699, "BUDGET", 4.0, "B", 70, 1000),
        make_product("WM_0002", "KITCHENTECH", "SILVER", 949, "BUDGET", 4.5, "A", 66, 1200,
                     wifi_enabled=True),
        make_product("WM_0003", "COOKMASTER", "BLACK", 1899, "MID_RANGE", 4.6, "A_PLUS", 60, 1300,
                     wifi_enabled=True, steam_cleaning=True),
        make_product("WM_0004", "APPLIANCE_PLUS", "WHITE", 3499, "PREMIUM", 5.2, "A_PLUS_PLUS", 55, 1500,
                     wifi_enabled=True, allergen_cycle=True, sanitize_cycle=True),
        make_product("WM_0005", "HOMEMATE", "SILVER", 6200, "LUXURY", 6.0, "A_PLUS_PLUS_PLUS", 47, 1800,
                     wifi_enabled=True, steam_cleaning=True, allergen_cycle=True),
    ]


@pytest.fixture
def seeded_products() -> List:
    """The default generated catalog (50 products, seed 42)."""
    from catalog.seed import generate_products
    return generate_products(42)


# ============================================================================
# Fixtures: Mock Services
# ============================================================================

@pytest.fixture
def mock_llm_client():
    """Async OpenAI-compatible client whose completions are scripted per test."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def llm_settings():
    """Settings with the AI path enabled and no backoff delay."""
    from config.settings import get_settings_for_testing
    return get_settings_for_testing(huggingface_api_key="test-token")


@pytest.fixture
def gateway(llm_settings, mock_llm_client):
    """FilterGateway wired to the mock client."""
    from filtering.gateway import FilterGateway
    return FilterGateway(settings=llm_settings, client=mock_llm_client)


@pytest.fixture
def disabled_gateway():
    """FilterGateway with no credentials: every request falls back."""
    from config.settings import get_settings_for_testing
    from filtering.gateway import FilterGateway
    return FilterGateway(settings=get_settings_for_testing())


# ============================================================================
# Fixtures: FastAPI Test Client
# ============================================================================

@pytest.fixture
def app(sample_products, disabled_gateway):
    """FastAPI application backed by the sample catalog and a fallback-only gateway."""
    from api.app import create_app
    from catalog.store import ProductCatalog, get_catalog
    from filtering.smart_filter import SmartFilterService, get_smart_filter_service

    application = create_app()
    catalog = ProductCatalog(sample_products)
    service = SmartFilterService(gateway=disabled_gateway)
    application.dependency_overrides[get_catalog] = lambda: catalog
    application.dependency_overrides[get_smart_filter_service] = lambda: service
    return application


@pytest.fixture
def client(app):
    """Synchronous HTTP client for testing FastAPI endpoints."""
    from fastapi.testclient import TestClient
    return TestClient(app)


# ============================================================================
# Markers auto-use
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "slow: marks tests as slow")

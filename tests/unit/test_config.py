"""
Tests for the configuration module.
"""

import os
from pathlib import Path

import pytest


class TestSettings:
    """Tests for Settings class."""

    def test_defaults(self):
        """Test that defaults are applied when nothing is configured."""
        from config.settings import Settings

        settings = Settings(_env_file=None)

        assert settings.host == "0.0.0.0"
        assert settings.port == 8080
        assert settings.llm_base_url == "https://router.huggingface.co/v1"
        assert settings.llm_max_retries == 2
        assert settings.llm_retry_base_delay_seconds == 1.0
        assert settings.catalog_seed == 42

    def test_get_settings_is_cached(self):
        from config.settings import get_settings

        assert get_settings() is get_settings()

    def test_get_settings_leaves_environment_untouched(self, monkeypatch):
        from config.settings import get_settings

        monkeypatch.delenv("ENV_FILE", raising=False)
        before = dict(os.environ)
        get_settings.cache_clear()
        try:
            get_settings()
        finally:
            get_settings.cache_clear()

        assert dict(os.environ) == before

    def test_is_development_property(self):
        """Test is_development property."""
        from config.settings import Settings

        for env in ["development", "dev", "local"]:
            assert Settings(_env_file=None, environment=env).is_development is True

        assert Settings(_env_file=None, environment="production").is_development is False

    def test_is_production_property(self):
        """Test is_production property."""
        from config.settings import Settings

        for env in ["production", "prod"]:
            assert Settings(_env_file=None, environment=env).is_production is True

        assert Settings(_env_file=None, environment="development").is_production is False

    def test_cors_origins_parsing(self):
        """Test that CORS origins can be parsed from comma-separated string."""
        from config.settings import Settings

        settings = Settings(
            _env_file=None,
            cors_origins="http://localhost:3000,http://localhost:5173",
        )

        assert settings.cors_origins == ["http://localhost:3000", "http://localhost:5173"]

    def test_products_path_parsing(self):
        """Test that products_path accepts strings and treats blank as unset."""
        from config.settings import Settings

        assert Settings(_env_file=None, products_path="/tmp/products.json").products_path == Path("/tmp/products.json")
        assert Settings(_env_file=None, products_path="  ").products_path is None

    def test_env_variables(self, monkeypatch):
        from config.settings import Settings

        monkeypatch.setenv("HUGGINGFACE_API_KEY", "hf_test")
        monkeypatch.setenv("LLM_MAX_RETRIES", "4")

        settings = Settings(_env_file=None)

        assert settings.llm_configured is True
        assert settings.llm_max_retries == 4

    def test_negative_retries_rejected(self):
        from pydantic import ValidationError
        from config.settings import Settings

        with pytest.raises(ValidationError):
            Settings(_env_file=None, llm_max_retries=-1)

    def test_settings_for_testing(self):
        """Test get_settings_for_testing function."""
        from config.settings import get_settings_for_testing

        settings = get_settings_for_testing(debug=False)

        assert settings.environment == "testing"
        assert settings.debug is False
        assert settings.llm_configured is False
        assert settings.llm_retry_base_delay_seconds == 0.0


class TestConstants:
    """Tests for constants module."""

    def test_smart_filter_config_defaults(self):
        from config.constants import DEFAULT_SMART_FILTER_CONFIG

        assert DEFAULT_SMART_FILTER_CONFIG.MAX_QUERY_LENGTH == 500
        assert DEFAULT_SMART_FILTER_CONFIG.SHORT_NUMERIC_QUERY_LENGTH == 50
        assert DEFAULT_SMART_FILTER_CONFIG.MIN_CONFIDENCE == 0.3

    def test_fallback_rules_defaults(self):
        from config.constants import DEFAULT_FALLBACK_RULES

        assert DEFAULT_FALLBACK_RULES.CONFIDENCE == 0.5
        assert DEFAULT_FALLBACK_RULES.AROUND_PRICE_SPREAD == 200
        assert DEFAULT_FALLBACK_RULES.SMALL_FAMILY_CAPACITY_MIN == 4.0
        assert DEFAULT_FALLBACK_RULES.SMALL_FAMILY_CAPACITY_MAX == 4.5
        assert DEFAULT_FALLBACK_RULES.LARGE_FAMILY_CAPACITY_MIN == 5.0
        assert DEFAULT_FALLBACK_RULES.QUIET_NOISE_MAX == 60

    def test_configs_are_frozen(self):
        from dataclasses import FrozenInstanceError
        from config.constants import DEFAULT_SMART_FILTER_CONFIG

        with pytest.raises(FrozenInstanceError):
            DEFAULT_SMART_FILTER_CONFIG.MAX_QUERY_LENGTH = 10


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

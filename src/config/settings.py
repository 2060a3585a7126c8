"""
Centralized settings management using pydantic-settings.

All environment variables and configuration values are defined here.
Use get_settings() to access the singleton settings instance.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Optional environment variables:
        - HUGGINGFACE_API_KEY: Token for the text-to-filter model (AI path
          is skipped and the rule-based extractor is used when empty)
        - LLM_BASE_URL: OpenAI-compatible inference endpoint
        - LLM_MODEL: Model id used for smart filtering
        - PRODUCTS_PATH: JSON file with the product catalog
        - ENVIRONMENT: Environment name (development, staging, production)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    # ==========================================================================
    # Server Configuration
    # ==========================================================================
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    # CORS Configuration
    cors_origins: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Allowed CORS origins"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # ==========================================================================
    # Smart Filter (LLM gateway)
    # ==========================================================================
    huggingface_api_key: str = Field(default="", description="API token for the inference endpoint")
    llm_base_url: str = Field(
        default="https://router.huggingface.co/v1",
        description="OpenAI-compatible base URL for the text-to-filter model"
    )
    llm_model: str = Field(
        default="mistralai/Mistral-7B-Instruct-v0.2",
        description="Model used to convert queries into filters"
    )
    llm_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for a single gateway call (seconds)"
    )
    llm_max_retries: int = Field(
        default=2,
        ge=0,
        description="Retries after the first failed gateway attempt"
    )
    llm_retry_base_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Backoff delay before the first retry; doubles per attempt"
    )
    llm_max_new_tokens: int = Field(default=500, description="Completion token budget")
    llm_temperature: float = Field(default=0.3, description="Sampling temperature")
    smart_filter_enabled: bool = Field(
        default=True,
        description="Enable the AI path (falls back to rules if disabled or failing)"
    )

    # ==========================================================================
    # Catalog
    # ==========================================================================
    products_path: Optional[Path] = Field(
        default=None,
        description="JSON file with products; generated from catalog_seed when unset"
    )
    catalog_seed: int = Field(default=42, description="Seed for generated catalog data")

    @field_validator("products_path", mode="before")
    @classmethod
    def parse_products_path(cls, v):
        if isinstance(v, str):
            return Path(v) if v.strip() else None
        return v

    @property
    def llm_configured(self) -> bool:
        return bool(self.huggingface_api_key)


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses lru_cache to ensure only one instance is created.
    Settings are loaded from environment variables and .env file.

    Returns:
        Settings: The application settings instance
    """
    # Try to find .env file in project root
    env_file = Path(__file__).parent.parent.parent / ".env"

    return Settings(_env_file=env_file if env_file.exists() else None)


def get_settings_for_testing(**overrides) -> Settings:
    """
    Create a settings instance for testing with optional overrides.

    This bypasses the cache to allow different settings in tests.

    Args:
        **overrides: Setting values to override

    Returns:
        Settings: A new settings instance with overrides applied
    """
    test_defaults = {
        "environment": "testing",
        "debug": True,
        "huggingface_api_key": "",
        "llm_retry_base_delay_seconds": 0.0,
    }
    test_defaults.update(overrides)

    return Settings(_env_file=None, **test_defaults)

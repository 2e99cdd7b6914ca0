"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_version: str = "0.1.0"
    debug: bool = False
    cors_allow_origins: list[str] = ["*"]

    # Storage ("memory" or "database")
    storage_backend: str = "memory"
    database_url: str = "postgresql+asyncpg://storefront:storefront_dev_password@db:5432/storefront"
    seed_demo_catalog: bool = True

    # Variant engine
    combination_warning_threshold: int = 100
    default_currency: str = "USD"
    variant_match_strategy: str = "first_match"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True


settings = Settings()

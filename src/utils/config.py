"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Claude API (checked on first call, not at startup)
    ANTHROPIC_API_KEY: Optional[str] = None
    CLAUDE_MODEL: str = "claude-sonnet-4-20250514"

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Analysis call
    ANALYSIS_MAX_TOKENS: int = 16000
    WEB_SEARCH_MAX_USES: int = 10

    # Draft generation call
    DRAFT_MAX_TOKENS: int = 8000

    # Timeouts (None = wait for the upstream client)
    REQUEST_TIMEOUT_SECONDS: Optional[float] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra fields in .env file
        case_sensitive=False,  # Allow both UPPERCASE and lowercase
    )


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()

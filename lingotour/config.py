"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # ==========================================================================
    # AI / LLM
    # ==========================================================================

    # Which provider to use: openai, gemini, anthropic
    llm_provider: str = "openai"

    # Primary: OpenAI (JSON mode)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"

    # Alternatives, called through DSPy/LiteLLM
    google_api_key: str = ""
    gemini_api_key: str = ""  # Alias for google_api_key
    gemini_model: str = "gemini-2.0-flash"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-latest"

    translation_temperature: float = 0.3
    provider_timeout: float = 60.0

    # ==========================================================================
    # Translation Pipeline
    # ==========================================================================

    # Directory of entity schema YAML files (empty = packaged schemas)
    schema_dir: str = ""

    # Save the merged bundle at the end of a streaming session
    persist_stream_results: bool = True

    # Local document store directory (empty = in-memory)
    data_dir: str = ""

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Application configuration via environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "GEO Tracker"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Database
    database_url: str = "sqlite+aiosqlite:///./geotracker.db"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Crawler settings
    user_agent: str = "GEOTracker/1.0"
    fetch_timeout_seconds: float = 8.0
    max_html_chars: int = 400_000
    max_pages: int = 5  # Homepage + internal pages per bootstrap

    # Prompt bootstrap
    default_prompt_count: int = 30
    min_prompt_count: int = 10
    max_prompt_count: int = 40

    # Models used when generating prompts (API keys live in the settings table)
    openai_bootstrap_model: str = "gpt-4o-mini"
    anthropic_bootstrap_model: str = "claude-haiku-4-20250514"
    perplexity_bootstrap_model: str = "sonar"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

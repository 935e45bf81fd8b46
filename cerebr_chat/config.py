"""
Configuration Management Module

Configures adapter parameters via environment variables or .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Adapter Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    APP_NAME: str = "Cerebr Chat"
    DEBUG: bool = False

    # HTTP Client Config
    # Request timeout (seconds)
    HTTP_TIMEOUT: int = 1800

    # Update Dispatch Config
    # Minimum interval between two pushes to the history store / UI (ms)
    UPDATE_INTERVAL_MS: int = 100

    # Default model per provider, used when the API config names none
    DEFAULT_OPENAI_MODEL: str = "gpt-4o"
    DEFAULT_GEMINI_MODEL: str = "gemini-1.5-flash"
    DEFAULT_CLAUDE_MODEL: str = "claude-3-5-sonnet-20241022"

    # Provider request parameters
    ANTHROPIC_VERSION: str = "2023-06-01"
    MAX_OUTPUT_TOKENS: int = 8192
    GEMINI_TEMPERATURE: float = 1.0

    # Misfiled reasoning detection
    # Prefix used when the caller enables detection but supplies no prefixes
    MISFILED_THINK_PREFIX: str = "think"

    # System prompt placeholder replaced with the user's language tag
    USER_LANGUAGE_PLACEHOLDER: str = "{{userLanguage}}"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get adapter configuration (Singleton)

    Uses lru_cache to ensure configuration is loaded only once.

    Returns:
        Settings: Adapter configuration instance
    """
    return Settings()

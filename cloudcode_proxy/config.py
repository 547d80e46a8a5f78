"""
Configuration Management Module

Configures application parameters via environment variables or .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cloudcode_proxy.common.constants import (
    CLOUDCODE_ENDPOINT_FALLBACKS,
    DEFAULT_PROJECT_ID,
)


class Settings(BaseSettings):
    """
    Application Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    APP_NAME: str = "Cloud Code Bridge"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Backend Config
    # Cloud Code hosts, tried in this order (most experimental first, production last)
    CLOUDCODE_ENDPOINTS: list[str] = list(CLOUDCODE_ENDPOINT_FALLBACKS)
    # Routing project used when discovery yields nothing
    DEFAULT_PROJECT_ID: str = DEFAULT_PROJECT_ID

    # Request Defaults
    DEFAULT_MODEL: str = "claude-3-5-sonnet-20241022"
    DEFAULT_MAX_TOKENS: int = 4096

    # Streaming Config
    # Number of characters carried by each synthesized text_delta event
    STREAMING_CHUNK_SIZE: int = Field(20, gt=0)

    # HTTP Client Config
    # Request timeout (seconds)
    HTTP_TIMEOUT: int = 600

    # Credential Config
    # Static bearer token; takes precedence over TOKEN_FILE when set
    ACCESS_TOKEN: Optional[str] = None
    # File holding the bearer token, re-read on refresh
    TOKEN_FILE: Optional[str] = None
    # How long a token is reused before the source is read again (seconds)
    TOKEN_REFRESH_INTERVAL_SECONDS: int = 300

    # CORS Config
    # Comma-separated list of allowed origins, "*" allows any origin
    ALLOWED_ORIGINS: str = "*"

    # Maximum accepted request body size (MB)
    REQUEST_BODY_LIMIT_MB: int = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get application configuration (Singleton)

    Uses lru_cache to ensure configuration is loaded only once.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()

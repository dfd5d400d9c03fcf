"""
Centralized configuration via Pydantic Settings.

Loads environment variables from the .env file and validates types.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Console settings loaded from environment variables.

    Attributes:
        APP_NAME: Name shown in the page titles
        ENVIRONMENT: Current environment (development, staging, production)
        API_BASE_URL: Base URL of the InfoMed REST API (including /api)
        REQUEST_TIMEOUT: Timeout in seconds for every HTTP request
        REQUEST_RETRIES: Retries for 502/503 and timeouts (0 disables them)
        RETRY_DELAY: Base delay in seconds between retries
        STORAGE_BACKEND: Where credentials persist ("session", "file" or "memory")
        STORAGE_PATH: JSON file used by the file backend
        RECORDS_PAGE_SIZE: Records per dashboard page
        DEFAULT_LANGUAGE: Language the records are written in
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "InfoMed"
    ENVIRONMENT: str = "development"

    # Remote API
    API_BASE_URL: str = "http://localhost:5000/api"
    REQUEST_TIMEOUT: float = 10
    REQUEST_RETRIES: int = 0
    RETRY_DELAY: float = 0.5

    # Credential storage
    STORAGE_BACKEND: str = "session"
    STORAGE_PATH: str = "~/.infomed/storage.json"

    # Views
    RECORDS_PAGE_SIZE: int = 10
    DEFAULT_LANGUAGE: str = "en"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def is_production(self) -> bool:
        """Check whether this is a production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def storage_file(self) -> Path:
        """Return the expanded path of the credential storage file."""
        return Path(self.STORAGE_PATH).expanduser()


@lru_cache
def get_settings() -> Settings:
    """
    Return the cached settings instance.

    Uses lru_cache so the .env file is read only once per process.
    """
    return Settings()

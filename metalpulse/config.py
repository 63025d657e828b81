"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from metalpulse.core.exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "MetalPulse"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: list[str] = ["*"]

    # Persisted state (bot-settings.json, metal-prices.json)
    DATA_DIR: str = "data"

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Metal Price API
    METAL_PRICE_API: Optional[str] = None
    METAL_PRICE_API_URL: str = "https://api.metalpriceapi.com/v1"

    # NewsData.io
    NEWS_DATA_API: Optional[str] = None
    NEWS_DATA_API_URL: str = "https://newsdata.io/api/1"
    NEWS_PER_FEED_LIMIT: int = Field(default=10, ge=1)
    MAX_RELEVANT_ARTICLES: int = Field(default=3, ge=1)

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_API_BASE: Optional[str] = None  # For OpenAI-compatible APIs
    OPENAI_MODEL: str = "gpt-5.2"
    OPENAI_FILTER_MODEL: Optional[str] = None  # Falls back to OPENAI_MODEL

    # X (Twitter) OAuth 1.0a user context
    CONSUMER_KEY: Optional[str] = None
    CONSUMER_KEY_SECRET: Optional[str] = None
    ACCESS_TOKEN: Optional[str] = None
    ACCESS_TOKEN_SECRET: Optional[str] = None

    # If set, POST /api/v1/cron requires "Authorization: Bearer <CRON_SECRET>"
    CRON_SECRET: Optional[str] = None

    # Timezone used when rendering the price timestamp into prompts
    POST_TIMEZONE: str = "Asia/Singapore"

    @property
    def data_path(self) -> Path:
        return Path(self.DATA_DIR)

    @property
    def filter_model(self) -> str:
        return self.OPENAI_FILTER_MODEL or self.OPENAI_MODEL

    def require(self, *names: str) -> tuple[str, ...]:
        """Return the values of the named credentials.

        Raises:
            ConfigError: If any of them is unset or blank.
        """
        missing = [name for name in names if not getattr(self, name, None)]
        if missing:
            raise ConfigError(
                f"{', '.join(missing)} environment variable"
                f"{'s are' if len(missing) > 1 else ' is'} not set"
            )
        return tuple(getattr(self, name) for name in names)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()

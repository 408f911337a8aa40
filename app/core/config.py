from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    RATES_CACHE_TTL_SECONDS, EXCHANGE_RATE_PROVIDER, EXCHANGE_API_KEY).
    The reference currency (USD) is fixed and deliberately not configurable.
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Regional Price Compare"
    debug: bool = False
    version: str = "0.1.0"

    # Exchange rates / caching
    rates_cache_ttl_seconds: int = 2 * 24 * 60 * 60  # 2 days
    exchange_rate_provider: str = "exchangerate-api"
    exchange_api_base_url: str = "https://v6.exchangerate-api.com/v6"
    exchange_api_key: Optional[str] = None
    # None keeps the transport default
    http_timeout_seconds: Optional[float] = None

    def init_post_load(self) -> None:
        """Validate derived constraints after env parsing."""
        allowed = {"exchangerate-api", "static"}
        if self.exchange_rate_provider not in allowed:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed}"
            )
        if self.rates_cache_ttl_seconds <= 0:
            raise ValueError("rates_cache_ttl_seconds must be positive")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings

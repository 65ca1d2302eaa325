"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./homefin.db"

    # External Services
    nrb_api_base: str = "https://www.nrb.org.np"

    # Service
    service_name: str = "homefin-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Exchange rates
    exchange_rate_cache_ttl_seconds: float = 3600.0
    fallback_usd_buy_rate: float = 132.5
    fallback_usd_sell_rate: float = 133.1


settings = Settings()

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        enable_decoding=False,
    )

    ENV: str = "dev"
    REDIS_URL: str = "redis://localhost:6379/0"

    POLYMARKET_BASE_URL: str = "https://gamma-api.polymarket.com"
    POLYMARKET_SITE_URL: str = "https://polymarket.com"
    POLY_EVENTS_LIMIT: int = 200
    POLY_EVENTS_OFFSET: int = 0
    POLY_EVENTS_CLOSED: bool = False
    POLY_EVENTS_ORDER: str | None = "volume24hr"
    POLY_EVENTS_ASCENDING: bool | None = False
    POLY_TIMEOUT_SECONDS: float = 15.0
    POLY_CIRCUIT_MAX_FAILURES: int = 5
    POLY_CIRCUIT_RESET_SECONDS: int = 60
    EXTERNAL_MAX_CONCURRENT_POLY_CALLS: int = 4

    BETS_MAX_RESULTS: int = 10
    BETS_DISPLAY_LIMIT: int = 5
    BETS_FETCH_RETRIES: int = 1

    CACHE_ENABLED: bool = True
    CACHE_TTL_BETS_SECONDS: int = 300
    CACHE_STALE_GRACE_SECONDS: int = 60
    EVENTS_PROXY_CACHE_SECONDS: int = 60

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    HTTPX_SLOW_REQUEST_THRESHOLD_SECONDS: float = 2.0

    @field_validator("POLY_EVENTS_ORDER", "POLY_EVENTS_ASCENDING", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if value == "":
            return None
        return value

    @field_validator("BETS_MAX_RESULTS", "BETS_DISPLAY_LIMIT", "BETS_FETCH_RETRIES", mode="before")
    @classmethod
    def _none_str_to_default(cls, value, info):
        if isinstance(value, str) and value.strip().lower() in {"", "none", "null"}:
            return cls.model_fields[info.field_name].default
        return value

settings = Settings()

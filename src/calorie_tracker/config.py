"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    upstash_redis_rest_url: str
    upstash_redis_rest_token: str
    api_token: str
    cache_rest_retries: int = 0
    cache_rest_retry_interval_seconds: float = 0.1
    daily_cache_ttl_seconds: int = 300
    weekly_cache_ttl_seconds: int = 3600
    invalidate_weekly_on_write: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

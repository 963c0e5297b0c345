"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from meal_composer.services.favorites import FavoritePolicy

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    session_ttl_seconds: int = 3600
    favorite_policy: FavoritePolicy = FavoritePolicy.CASCADE
    default_confidence: float = 0.95
    default_timezone: str = "UTC"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

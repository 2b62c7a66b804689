"""Application configuration."""

import os
from datetime import timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    supabase_storage_bucket: str = "selfies"
    admin_token: str
    payment_webhook_token: str
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "medium"
    openai_store: bool = False
    google_credentials_file: str | None = None
    face_min_detection_confidence: float = 0.75
    session_ttl_minutes: int = 60
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def session_ttl(self) -> timedelta:
        """Return the lifetime of a new analysis session."""
        return timedelta(minutes=self.session_ttl_minutes)

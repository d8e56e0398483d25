"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openrouter_api_key: str | None = None
    openrouter_model: str = "anthropic/claude-3-haiku"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    app_referer: str = "http://localhost:8000"
    app_title: str = "Calorie Tracker"
    storage_backend: str = "file"
    storage_path: str = ".calorie-tracker.json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    timezone: str | None = None
    max_image_bytes: int = 5 * 1024 * 1024
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str) -> str:
    """Normalize the configured storage backend name."""
    cleaned = raw.strip().lower()
    if cleaned in {"", "json", "file"}:
        return "file"
    if cleaned in {"memory", "supabase"}:
        return cleaned
    raise ValueError(f"Unknown storage backend: {raw}")

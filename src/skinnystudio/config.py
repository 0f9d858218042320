"""Settings for the Skinny Studio orchestrator.

Changes:
  - 2026-03-04: Added orchestration_mode so a shared platform Gemini key can
    take precedence over keys supplied by end users.
  - 2026-02-26: Usage table name is configurable (defaults to gemini_usage).

All values can be set through environment variables prefixed with
``SKINNY_`` (e.g. ``SKINNY_GOOGLE_AI_API_KEY``) or a local ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide configuration, loaded once at startup."""

    model_config = SettingsConfigDict(
        env_prefix="SKINNY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Orchestrator LLM
    google_ai_api_key: str | None = Field(
        default=None, description="Platform Gemini key used when the user supplies none"
    )
    orchestration_mode: Literal["user_keys", "platform_key"] = "user_keys"
    default_chat_model: str = "gemini-2.0-flash-lite"

    # Downstream generation endpoint
    generate_url: str = "http://localhost:3000/api/generate"
    generate_timeout: float = 60.0

    # Usage log (Supabase PostgREST)
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    usage_table: str = "gemini_usage"

    # HTTP server
    cors_allowed_origins: list[str] = Field(default_factory=list)
    log_level: str = "INFO"

    @property
    def usage_logging_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)

    @property
    def usage_endpoint(self) -> str:
        """PostgREST URL of the usage table."""
        base = (self.supabase_url or "").rstrip("/")
        return f"{base}/rest/v1/{self.usage_table}"


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings singleton."""
    return Settings()

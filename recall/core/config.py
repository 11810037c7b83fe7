"""Configuration management for Recall Engine."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    # Environment variables should be set directly
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # Environment
    RECALL_ENV: str = Field(default="dev", description="Environment: dev, staging, prod, test")

    # LLM gateway (OpenAI-compatible chat completions endpoint)
    AI_GATEWAY_URL: str = Field(
        default="https://ai.gateway.lovable.dev/v1", description="Base URL of the LLM gateway"
    )
    AI_GATEWAY_API_KEY: str | None = Field(default=None, description="LLM gateway API key")
    SCORING_MODEL: str = Field(
        default="google/gemini-3-flash-preview", description="Model used for sub-score analysis"
    )
    SCORING_TEMPERATURE: float = Field(default=0.2, description="Sampling temperature for scoring")
    SCORING_MAX_TOKENS: int = Field(default=4096, description="Max completion tokens for scoring")

    # Outbound email (Resend)
    RESEND_API_KEY: str | None = Field(default=None, description="Resend API key")
    RESEND_FROM_EMAIL: str = Field(default="onboarding@resend.dev", description="Sender address")
    RESEND_FROM_NAME: str = Field(default="Recall AI", description="Sender display name")
    APP_BASE_URL: str = Field(
        default="https://recallbrain.lovable.app", description="Dashboard URL used in email links"
    )

    # Notification defaults for newly created preference rows
    DEFAULT_THRESHOLD_VALUE: int = Field(default=70, ge=0, le=100)
    DEFAULT_IMPROVEMENT_THRESHOLD: int = Field(default=10, gt=0)

    # Admin API key for internal tools
    ADMIN_API_KEY: str | None = Field(default=None, description="Admin API key (X-API-Key)")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()

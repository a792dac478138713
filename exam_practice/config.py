"""Application settings loaded from the environment / .env."""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed settings for the exam practice service."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = Field(default="sqlite:///./exam_practice.db")

    # Where authoritative test definitions (with answers) are read from
    TEST_REPOSITORY_BACKEND: Literal["sql", "supabase"] = "sql"
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    UPSTREAM_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    LLM_GATEWAY_URL: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    LLM_API_KEY: Optional[str] = None
    LLM_MODEL: str = "google/gemini-2.5-flash"
    LLM_TIMEOUT_SECONDS: float = Field(default=60.0, gt=0)

    TEST_SESSION_GRACE_MINUTES: int = Field(default=30, ge=0)

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""
    return Settings()

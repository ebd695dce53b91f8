from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings

# Frontend origins allowed during local development
DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
]

# Hosted frontend, only allowed when APP_ENV=production
PRODUCTION_ORIGINS = [
    "https://syllabug.vercel.app",
    "https://www.syllabug.vercel.app",
]


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    openai_api_key: str = ""
    anthropic_api_key: str = ""  # Only needed when llm_provider == "anthropic"

    # Model selection
    llm_provider: str = "openai"
    primary_model: str = "gpt-4o"
    fallback_model: str = "gpt-3.5-turbo"
    anthropic_primary_model: str = "claude-sonnet-4-5"
    anthropic_fallback_model: str = "claude-haiku-4-5"

    # Extraction pipeline
    llm_timeout_seconds: float = 45.0
    early_ack_seconds: float = 10.0
    max_prompt_chars: int = 15_000

    # App config
    app_env: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    max_file_size_mb: int = 15
    cors_origin: str = ""  # comma-separated extra origins
    log_level: str = "INFO"
    version: str = "1.0.0"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @property
    def allowed_origins(self) -> list[str]:
        """Development origins plus CORS_ORIGIN entries (and hosted origins in production)."""
        origins = list(DEV_ORIGINS)
        origins.extend(o.strip() for o in self.cors_origin.split(",") if o.strip())
        if self.app_env == "production":
            origins.extend(PRODUCTION_ORIGINS)
        return origins


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()

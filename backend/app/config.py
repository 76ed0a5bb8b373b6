from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    PROJECT_NAME: str = "Watchman Moderation"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # CORS (the gate is called from browser clients on any origin)
    CORS_ORIGINS: List[str] = ["*"]

    # Generation provider selection
    PROVIDER: Literal["openai", "groq"] = "openai"

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"

    # Groq (OpenAI-compatible endpoint)
    GROQ_API_KEY: str = ""
    GROQ_MODEL: str = "llama-3.1-8b-instant"
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"

    # Generation call behaviour
    TEMPERATURE: float = 0.0
    GENERATION_TIMEOUT_S: float = 20.0
    GENERATION_MAX_RETRIES: int = 1  # transport failures only (network, 429, 5xx)
    GENERATION_RETRY_BACKOFF_S: float = 0.5

    # Prompt
    MAX_ITEM_CHARS: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    def provider_api_key(self) -> str:
        if self.PROVIDER == "groq":
            return self.GROQ_API_KEY
        return self.OPENAI_API_KEY


@lru_cache()
def get_settings() -> Settings:
    settings = Settings()

    # Only validate the provider key in production
    if settings.ENVIRONMENT == "production" and not settings.provider_api_key().strip():
        raise ValueError(f"API key for provider '{settings.PROVIDER}' is required in production environment")

    return settings

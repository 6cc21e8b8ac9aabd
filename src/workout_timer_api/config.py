"""Configuration settings for the workout timer API."""
import os
from typing import List, Literal


EnvironmentType = Literal["development", "staging", "production"]
ProviderType = Literal["openai", "anthropic"]
PipelineOrder = Literal["ai_first", "extractors_first"]


class Settings:
    """Application settings."""

    # Feature flags
    HELICONE_ENABLED: bool = False

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # Generative provider
    LLM_PROVIDER: ProviderType = "openai"
    OPENAI_MODEL: str = "gpt-4o-mini"
    ANTHROPIC_MODEL: str = "claude-3-5-sonnet-20241022"
    LLM_TIMEOUT_SECONDS: float = 60.0

    # Strategy order for POST /generate
    PIPELINE_ORDER: PipelineOrder = "ai_first"

    # API Keys
    OPENAI_API_KEY: str | None = None
    ANTHROPIC_API_KEY: str | None = None
    HELICONE_API_KEY: str | None = None

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        try:
            self.PORT = int(os.getenv("PORT", "8080"))
        except ValueError:
            self.PORT = 8080
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
        self.CORS_ALLOW_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()] or ["*"]

        # Feature flags
        self.HELICONE_ENABLED = os.getenv("HELICONE_ENABLED", "false").lower() == "true"

        # Generative provider
        provider = os.getenv("LLM_PROVIDER", "openai").lower()
        self.LLM_PROVIDER = provider if provider in ("openai", "anthropic") else "openai"  # type: ignore
        self.OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-5-sonnet-20241022")
        try:
            self.LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
        except ValueError:
            self.LLM_TIMEOUT_SECONDS = 60.0

        order = os.getenv("PIPELINE_ORDER", "ai_first").lower()
        self.PIPELINE_ORDER = order if order in ("ai_first", "extractors_first") else "ai_first"  # type: ignore

        # API Keys
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
        self.ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
        self.HELICONE_API_KEY = os.getenv("HELICONE_API_KEY")


settings = Settings()

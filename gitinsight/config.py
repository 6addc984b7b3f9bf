"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache
from typing import Optional


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").strip().lower() == "true"


@dataclass(frozen=True)
class LLMConfig:
    """Resolved configuration for one LLM client.

    Values are opaque to the categorization core; the router validates them
    when the client is constructed.
    """

    provider: str
    model: str
    credential: Optional[str] = None
    endpoint_url: Optional[str] = None
    timeout_seconds: float = 30.0
    retries: int = 3
    temperature: float = 0.1
    prevent_numeric_categories: bool = True


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "GitInsight"
    debug: bool = False

    # Database (postgresql+psycopg for psycopg3)
    database_url: str = "postgresql+psycopg://localhost:5432/git_analytics"
    db_connect_timeout: int = 10  # seconds

    # JSON exports produced by the git extractor, one <repo>.json per repository
    exports_dir: str = "data/exports"

    # AI categorization
    ai_provider: str = "ollama"
    ai_timeout: float = 30.0
    ai_retries: int = 3
    ai_temperature: float = 0.1
    ai_debug: bool = False
    prevent_numeric_categories: bool = True

    # Provider specifics
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    anthropic_api_key: Optional[str] = None
    anthropic_model: str = "claude-haiku-4-5-20251001"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    ollama_url: str = "http://localhost:11434"
    ollama_model: str = "llama2"

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = _env_bool("DEBUG", False)

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'git_analytics')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.exports_dir = os.getenv("EXPORTS_DIR", self.exports_dir)

        self.ai_provider = os.getenv("AI_PROVIDER", self.ai_provider).strip().lower()
        self.ai_timeout = float(os.getenv("AI_TIMEOUT", str(self.ai_timeout)))
        self.ai_retries = int(os.getenv("AI_RETRIES", str(self.ai_retries)))
        self.ai_temperature = float(os.getenv("AI_TEMPERATURE", str(self.ai_temperature)))
        self.ai_debug = _env_bool("AI_DEBUG", False)
        self.prevent_numeric_categories = _env_bool("PREVENT_NUMERIC_CATEGORIES", True)

        self.openai_api_key = os.getenv("OPENAI_API_KEY")
        self.openai_model = os.getenv("OPENAI_MODEL", self.openai_model)
        self.anthropic_api_key = os.getenv("ANTHROPIC_API_KEY")
        self.anthropic_model = os.getenv("ANTHROPIC_MODEL", self.anthropic_model)
        self.gemini_api_key = os.getenv("GEMINI_API_KEY")
        self.gemini_model = os.getenv("GEMINI_MODEL", self.gemini_model)
        self.ollama_url = os.getenv("OLLAMA_URL", self.ollama_url)
        self.ollama_model = os.getenv("OLLAMA_MODEL", self.ollama_model)

    def llm_config(self, provider: str | None = None) -> LLMConfig:
        """Resolve the explicit client configuration for *provider*.

        Provider-specific ``<PROVIDER>_TEMPERATURE`` overrides ``AI_TEMPERATURE``.
        Unknown providers resolve with empty model/credential; the router rejects them.
        """
        name = (provider or self.ai_provider).strip().lower()
        model, credential, endpoint = {
            "openai": (self.openai_model, self.openai_api_key, None),
            "anthropic": (self.anthropic_model, self.anthropic_api_key, None),
            "gemini": (self.gemini_model, self.gemini_api_key, None),
            "ollama": (self.ollama_model, None, self.ollama_url),
        }.get(name, ("", None, None))

        temperature = self.ai_temperature
        override = os.getenv(f"{name.upper()}_TEMPERATURE")
        if override:
            temperature = float(override)

        return LLMConfig(
            provider=name,
            model=model,
            credential=credential,
            endpoint_url=endpoint,
            timeout_seconds=self.ai_timeout,
            retries=self.ai_retries,
            temperature=temperature,
            prevent_numeric_categories=self.prevent_numeric_categories,
        )

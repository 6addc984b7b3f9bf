"""
LLM client router / factory.

Builds a ``CommitCategorizationClient`` around the transport selected by the
provider key in ``LLMConfig``. Clients built from settings are cached per
provider key to reuse connections.
"""

from __future__ import annotations

import logging
import os
import time
from typing import TYPE_CHECKING, Any, Callable

from gitinsight.config import LLMConfig
from gitinsight.llm.client import CommitCategorizationClient
from gitinsight.llm.provider import LLMConfigurationError, LLMProvider

if TYPE_CHECKING:
    from gitinsight.config import Settings

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("openai", "anthropic", "gemini", "ollama")

# Module-level cache: provider key -> client
_client_cache: dict[str, CommitCategorizationClient] = {}


def _build_provider(config: LLMConfig) -> LLMProvider:
    # Imports are local so an unused vendor SDK is never imported.
    if config.provider == "openai":
        from gitinsight.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(
            api_key=config.credential,
            model=config.model,
            timeout=config.timeout_seconds,
            base_url=config.endpoint_url,
        )
    if config.provider == "anthropic":
        from gitinsight.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(
            api_key=config.credential, model=config.model, timeout=config.timeout_seconds
        )
    if config.provider == "gemini":
        from gitinsight.llm.gemini_provider import GeminiProvider

        return GeminiProvider(
            api_key=config.credential, model=config.model, timeout=config.timeout_seconds
        )
    if config.provider == "ollama":
        from gitinsight.llm.ollama_provider import OllamaProvider

        return OllamaProvider(
            url=config.endpoint_url, model=config.model, timeout=config.timeout_seconds
        )
    raise LLMConfigurationError(
        f"Unsupported AI provider: {config.provider}. "
        f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
    )


def create_llm_client(
    config: LLMConfig,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> CommitCategorizationClient:
    """Build a validated client for *config*.

    Raises:
        LLMConfigurationError: unknown provider or any construction failure,
            prefixed with the provider name.
    """
    try:
        provider = _build_provider(config)
        client = CommitCategorizationClient(
            provider,
            timeout=config.timeout_seconds,
            retries=config.retries,
            temperature=config.temperature,
            prevent_numeric=config.prevent_numeric_categories,
            sleep=sleep,
        )
    except LLMConfigurationError as e:
        raise LLMConfigurationError(f"Failed to create {config.provider} client: {e}") from e
    except Exception as e:
        raise LLMConfigurationError(
            f"Unexpected error creating {config.provider} client: {e}"
        ) from e

    logger.info(
        "Created LLM client: provider=%s model=%s timeout=%ss retries=%d",
        config.provider,
        config.model,
        config.timeout_seconds,
        config.retries,
    )
    return client


def get_llm_client(
    provider: str | None = None,
    settings: Settings | None = None,
) -> CommitCategorizationClient:
    """Return a cached client for *provider* (default: ``AI_PROVIDER``)."""
    if settings is None:
        from gitinsight.config import get_settings

        settings = get_settings()

    config = settings.llm_config(provider)
    if config.provider in _client_cache:
        return _client_cache[config.provider]

    client = create_llm_client(config)
    _client_cache[config.provider] = client
    return client


def clear_client_cache() -> None:
    """Clear the client cache. Useful for testing."""
    _client_cache.clear()


def ai_enabled(provider: str | None = None) -> bool:
    """True when *provider* (default: the ``AI_PROVIDER`` env var) is set and supported."""
    raw = provider if provider is not None else os.getenv("AI_PROVIDER")
    return bool(raw) and raw.strip().lower() in SUPPORTED_PROVIDERS


def validate_configuration(
    provider: str | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Check provider settings without building a client.

    Returns ``{"valid": bool, "errors": [str, ...]}``. A missing model name is
    reported but does not invalidate the configuration (defaults apply).
    """
    if settings is None:
        from gitinsight.config import get_settings

        settings = get_settings()

    config = settings.llm_config(provider)
    result: dict[str, Any] = {"valid": True, "errors": []}

    if config.provider not in SUPPORTED_PROVIDERS:
        result["valid"] = False
        result["errors"].append(
            f"Unsupported provider: {config.provider}. "
            f"Must be one of: {', '.join(SUPPORTED_PROVIDERS)}"
        )
        return result

    if config.provider == "ollama":
        url = config.endpoint_url or ""
        if not url.startswith(("http://", "https://")):
            result["valid"] = False
            result["errors"].append(
                f"OLLAMA_URL must start with http:// or https://, got: {url}"
            )
    elif not config.credential:
        result["valid"] = False
        result["errors"].append(f"{config.provider.upper()}_API_KEY environment variable is required")

    if not config.model:
        result["errors"].append(f"{config.provider.upper()}_MODEL not set")

    if config.timeout_seconds <= 0:
        result["valid"] = False
        result["errors"].append("AI_TIMEOUT must be positive")
    if config.retries < 0:
        result["valid"] = False
        result["errors"].append("AI_RETRIES must be non-negative")
    if not 0.0 <= config.temperature <= 2.0:
        result["valid"] = False
        result["errors"].append("Temperature must be between 0 and 2")

    return result

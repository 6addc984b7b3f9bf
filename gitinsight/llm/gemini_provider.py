"""Google Gemini LLM provider implementation (google-genai SDK)."""

from __future__ import annotations

import logging
import time
from typing import Any

from google import genai
from google.genai import types

from gitinsight.llm.provider import LLMConfigurationError, LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
MAX_OUTPUT_TOKENS = 1024


class GeminiProvider(LLMProvider):
    """Concrete LLM provider backed by the Gemini API.

    A preconfigured ``genai.Client`` may be injected (tests do this); otherwise
    one is built from *api_key*.
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
        *,
        client: genai.Client | None = None,
    ) -> None:
        if not api_key:
            raise LLMConfigurationError("GEMINI_API_KEY environment variable is required")
        if not model:
            raise LLMConfigurationError("GEMINI_MODEL must be specified")
        self.model = model
        self.timeout = timeout
        self._client = client or genai.Client(
            api_key=api_key,
            # HttpOptions.timeout is in milliseconds
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> str:
        config_kwargs: dict[str, Any] = {
            "temperature": kwargs.get("temperature", 0.1),
            "max_output_tokens": kwargs.get("max_tokens", MAX_OUTPUT_TOKENS),
        }
        if system_prompt:
            config_kwargs["system_instruction"] = system_prompt

        start = time.monotonic()
        response = self._client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(**config_kwargs),
        )
        elapsed = time.monotonic() - start

        logger.info("LLM call: provider=gemini model=%s latency=%.2fs", self.model, elapsed)
        return _extract_text(response)


def _extract_text(response: Any) -> str:
    """Pull the answer text out of a GenerateContentResponse.

    ``response.text`` covers the common case; fall back to the first
    candidate's parts when the shortcut is empty.
    """
    text = getattr(response, "text", None)
    if text:
        return text
    candidates = getattr(response, "candidates", None) or []
    if candidates:
        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        return "".join(getattr(part, "text", "") or "" for part in parts)
    return ""

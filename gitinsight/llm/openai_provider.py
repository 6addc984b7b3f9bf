"""
OpenAI LLM provider implementation.

Uses the openai Python SDK (>=1.0.0) with synchronous client.
SDK retries are disabled; ``RetryController`` owns the retry policy.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from openai import OpenAI

from gitinsight.llm.provider import LLMConfigurationError, LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
MAX_TOKENS = 1024


class OpenAIProvider(LLMProvider):
    """Concrete LLM provider backed by the OpenAI API."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
        base_url: str | None = None,
    ) -> None:
        if not api_key:
            raise LLMConfigurationError("OPENAI_API_KEY environment variable is required")
        if not model:
            raise LLMConfigurationError("OPENAI_MODEL must be specified")
        self.model = model
        self.timeout = timeout
        self._client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)

    # ------------------------------------------------------------------
    # LLMProvider interface
    # ------------------------------------------------------------------

    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> str:
        """Send prompt to OpenAI and return the completion text.

        Supported kwargs:
            temperature (float): Sampling temperature (default 0.1).
            max_tokens (int): Maximum tokens in the response (default 1024).
        """
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        start = time.monotonic()
        response = self._client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=kwargs.get("temperature", 0.1),
            max_tokens=kwargs.get("max_tokens", MAX_TOKENS),
        )
        elapsed = time.monotonic() - start

        text = response.choices[0].message.content or ""

        usage = response.usage
        logger.info(
            "LLM call: provider=openai model=%s tokens_in=%d tokens_out=%d latency=%.2fs",
            self.model,
            usage.prompt_tokens if usage else 0,
            usage.completion_tokens if usage else 0,
            elapsed,
        )
        return text

"""Anthropic (Claude) LLM provider implementation."""

from __future__ import annotations

import logging
import time
from typing import Any

import anthropic

from gitinsight.llm.provider import LLMConfigurationError, LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"
MAX_TOKENS = 1024


class AnthropicProvider(LLMProvider):
    """Concrete LLM provider backed by the Anthropic Messages API."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
    ) -> None:
        if not api_key:
            raise LLMConfigurationError("ANTHROPIC_API_KEY environment variable is required")
        if not model:
            raise LLMConfigurationError("ANTHROPIC_MODEL must be specified")
        self.model = model
        self.timeout = timeout
        self._client = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=0)

    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> str:
        create_kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": kwargs.get("max_tokens", MAX_TOKENS),
            "temperature": kwargs.get("temperature", 0.1),
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            create_kwargs["system"] = system_prompt

        start = time.monotonic()
        response = self._client.messages.create(**create_kwargs)
        elapsed = time.monotonic() - start

        # Content is a list of blocks; only text blocks carry the answer.
        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        logger.info(
            "LLM call: provider=anthropic model=%s latency=%.2fs", self.model, elapsed
        )
        return text

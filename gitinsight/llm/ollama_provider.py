"""Ollama (locally hosted models) LLM provider implementation over HTTP."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from gitinsight.llm.provider import LLMConfigurationError, LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:11434"
DEFAULT_MODEL = "llama2"
NUM_PREDICT = 1024  # max_tokens equivalent for Ollama


class OllamaProvider(LLMProvider):
    """Concrete LLM provider backed by a local Ollama server (``/api/chat``)."""

    name = "ollama"

    def __init__(
        self,
        url: str | None = DEFAULT_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        if not url:
            raise LLMConfigurationError("OLLAMA_URL must be specified")
        if not url.startswith(("http://", "https://")):
            raise LLMConfigurationError(
                f"OLLAMA_URL must start with http:// or https://, got: {url}"
            )
        if not model:
            raise LLMConfigurationError("OLLAMA_MODEL must be specified")
        self.url = url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._client = client or httpx.Client(base_url=self.url, timeout=timeout)

    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> str:
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": {
                "temperature": kwargs.get("temperature", 0.1),
                "num_predict": kwargs.get("max_tokens", NUM_PREDICT),
            },
        }

        start = time.monotonic()
        response = self._client.post("/api/chat", json=payload)
        response.raise_for_status()
        elapsed = time.monotonic() - start

        logger.info("LLM call: provider=ollama model=%s latency=%.2fs", self.model, elapsed)
        return _extract_text(response.json())


def _extract_text(body: Any) -> str:
    """Return ``message.content`` from a chat reply (``response`` for /api/generate shapes)."""
    if isinstance(body, str):
        return body
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, dict) and message.get("content") is not None:
            return str(message["content"])
        if body.get("response") is not None:
            return str(body["response"])
    raise ValueError(f"Unexpected Ollama response shape: {str(body)[:200]}")

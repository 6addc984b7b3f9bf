"""
LLM provider abstraction and error taxonomy.

A provider is a transport only: it sends one prompt and returns the raw
completion text. Prompt construction, retries and parsing live in
``CommitCategorizationClient``.
"""

from abc import ABC, abstractmethod
from typing import Any


class LLMError(Exception):
    """Base class for every failure surfaced by the LLM layer."""


class LLMConfigurationError(LLMError):
    """Client or provider could not be configured (raised at construction)."""


class LLMTimeoutError(LLMError, TimeoutError):
    """A single attempt exceeded its wall-clock budget. Never retried."""


class LLMAPIError(LLMError):
    """Provider call failed after all retries, or its response was unusable."""


class ParseError(LLMAPIError):
    """The raw response could not be turned into a categorization result.

    Keeps the raw response text to aid debugging.
    """

    def __init__(self, message: str, *, response_text: str | None = None) -> None:
        super().__init__(message)
        self.response_text = response_text


class LLMProvider(ABC):
    """Abstract base for LLM providers."""

    name: str = "base"

    @abstractmethod
    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> str:
        """Send prompt and return completion text."""
        ...

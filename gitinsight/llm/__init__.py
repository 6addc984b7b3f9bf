"""LLM layer: provider transports, retry policy, prompt and response handling."""

from gitinsight.llm.client import CommitCategorizationClient
from gitinsight.llm.provider import (
    LLMAPIError,
    LLMConfigurationError,
    LLMError,
    LLMProvider,
    LLMTimeoutError,
    ParseError,
)
from gitinsight.llm.router import create_llm_client, get_llm_client

__all__ = [
    "CommitCategorizationClient",
    "LLMAPIError",
    "LLMConfigurationError",
    "LLMError",
    "LLMProvider",
    "LLMTimeoutError",
    "ParseError",
    "create_llm_client",
    "get_llm_client",
]

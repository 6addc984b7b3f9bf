"""
Commit categorization client.

One client class for every provider: the provider-specific part is the
``LLMProvider`` transport injected at construction. The client renders the
prompt, runs the transport call under the retry controller and parses the
answer.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Sequence

from gitinsight.llm.prompt_builder import build_categorization_prompt
from gitinsight.llm.provider import LLMConfigurationError, LLMProvider
from gitinsight.llm.response_parser import parse_categorization_response
from gitinsight.llm.retry import DEFAULT_RETRIES, DEFAULT_TIMEOUT, RetryController
from gitinsight.schemas.categorization import CategorizationResult, CommitContext

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.1
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0


class CommitCategorizationClient:
    """Categorizes commits through a pluggable LLM transport.

    Raises ``LLMConfigurationError`` at construction for a non-positive
    timeout, negative retries or a temperature outside [0.0, 2.0]. At call
    time only ``LLMTimeoutError`` and ``LLMAPIError`` (incl. ``ParseError``)
    escape ``categorize``.
    """

    def __init__(
        self,
        provider: LLMProvider,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        temperature: float = DEFAULT_TEMPERATURE,
        prevent_numeric: bool | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if timeout <= 0:
            raise LLMConfigurationError("Timeout must be positive")
        if retries < 0:
            raise LLMConfigurationError("Retries must be non-negative")
        if not MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE:
            raise LLMConfigurationError("Temperature must be between 0 and 2")

        self.provider = provider
        self.timeout = timeout
        self.retries = retries
        self.temperature = temperature
        self.prevent_numeric = prevent_numeric
        self._retry = RetryController(timeout=timeout, retries=retries, sleep=sleep)

    @property
    def provider_name(self) -> str:
        return self.provider.name

    def categorize(
        self, commit: CommitContext, existing_categories: Sequence[str]
    ) -> CategorizationResult:
        """Assign a category, scores and description to *commit*."""
        logger.debug("Categorizing commit %s with %s", commit.hash, self.provider_name)
        prompt = build_categorization_prompt(commit, existing_categories)

        raw = self._retry.run(
            lambda: self.provider.complete(prompt, temperature=self.temperature)
        )
        logger.debug("%s response for %s: %s", self.provider_name, commit.hash, raw)

        return parse_categorization_response(raw, prevent_numeric=self.prevent_numeric)

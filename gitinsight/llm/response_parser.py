"""Parse the labelled-text categorization response returned by an LLM.

Expected shape (see ``commit_categorization_v1.md``)::

    CATEGORY: BILLING
    CONFIDENCE: 90
    BUSINESS_IMPACT: 80
    REASON: billing fix
    DESCRIPTION: Two to four sentences,
    possibly wrapped over several lines.

Each field is extracted independently; only CATEGORY is mandatory.
"""

from __future__ import annotations

import logging
import re

from gitinsight.llm.provider import ParseError
from gitinsight.schemas.categorization import (
    DEFAULT_BUSINESS_IMPACT,
    DEFAULT_CONFIDENCE,
    DEFAULT_REASON,
    CategorizationResult,
)
from gitinsight.services.category_validator import is_valid_category, rejection_reason

logger = logging.getLogger(__name__)

# Any text up to end of line is captured: rejecting "2.58.0" or "#6802" is the
# validator's job, and it needs to see the value to report it.
_CATEGORY_RE = re.compile(r"CATEGORY:[ \t]*(\S[^\n]*)", re.IGNORECASE)
_CONFIDENCE_RE = re.compile(r"CONFIDENCE:\s*(-?\d+)", re.IGNORECASE)
_BUSINESS_IMPACT_RE = re.compile(r"BUSINESS_IMPACT:\s*(-?\d+)", re.IGNORECASE)
_REASON_RE = re.compile(r"REASON:[ \t]*(.+?)(?:\n|DESCRIPTION:|$)", re.IGNORECASE | re.DOTALL)
_DESCRIPTION_RE = re.compile(r"DESCRIPTION:\s*(.+?)(?:\n\s*\n|$)", re.IGNORECASE | re.DOTALL)


def _clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


def _extract_int(pattern: re.Pattern[str], text: str, default: int) -> int:
    match = pattern.search(text)
    if match is None:
        return default
    return _clamp(int(match.group(1)))


def parse_categorization_response(
    raw: str, *, prevent_numeric: bool | None = None
) -> CategorizationResult:
    """Extract a ``CategorizationResult`` from *raw*.

    Raises:
        ParseError: no CATEGORY label, or the category fails validation.
    """
    category_match = _CATEGORY_RE.search(raw)
    if category_match is None:
        raise ParseError("Could not extract category from LLM response", response_text=raw)

    category = category_match.group(1).strip().upper()
    if not is_valid_category(category, prevent_numeric=prevent_numeric):
        logger.debug(
            "Rejected category %r: %s",
            category,
            rejection_reason(category, prevent_numeric=prevent_numeric),
        )
        raise ParseError(
            f"Invalid category generated by LLM: '{category}' (failed validation)",
            response_text=raw,
        )

    reason_match = _REASON_RE.search(raw)
    reason = reason_match.group(1).strip() if reason_match else ""

    description_match = _DESCRIPTION_RE.search(raw)
    description = description_match.group(1).strip() if description_match else None

    return CategorizationResult(
        category=category,
        confidence=_extract_int(_CONFIDENCE_RE, raw, DEFAULT_CONFIDENCE),
        business_impact=_extract_int(_BUSINESS_IMPACT_RE, raw, DEFAULT_BUSINESS_IMPACT),
        reason=reason or DEFAULT_REASON,
        description=description or None,
    )

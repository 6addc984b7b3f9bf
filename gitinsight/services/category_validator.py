"""Category name validation.

LLMs routinely hallucinate issue numbers, version tags or years as
"categories". Every category produced by the categorizer passes through
``is_valid_category`` before it can reach the taxonomy.
"""

from __future__ import annotations

import re

MIN_LENGTH = 2
MAX_LENGTH = 50

_VERSION_RE = re.compile(r"^\d+\.\d+(\.\d+)?")
_NUMERIC_RE = re.compile(r"^#?\d+$")


def _prevent_numeric_default() -> bool:
    from gitinsight.config import get_settings

    return get_settings().prevent_numeric_categories


def rejection_reason(candidate: str | None, *, prevent_numeric: bool | None = None) -> str:
    """Return why *candidate* is not an acceptable category, or ``"valid"``.

    A category is valid only if all of these hold:

    1. non-empty after trimming
    2. 2 to 50 characters
    3. at least one letter
    4. starts with a letter
    5. (numeric policy only) not a version, not purely numeric, and digits
       make up less than half of the characters

    Policy checks run before 3 and 4 so the reason names the most specific
    problem (``"2.58.0"`` reports a version, not a missing letter).
    ``prevent_numeric=None`` reads ``PREVENT_NUMERIC_CATEGORIES`` from settings.
    """
    if candidate is None or not candidate.strip():
        return "nil or empty"
    value = candidate.strip()
    if len(value) > MAX_LENGTH:
        return "too long (>50 chars)"
    if len(value) < MIN_LENGTH:
        return "too short (<2 chars)"
    if prevent_numeric is None:
        prevent_numeric = _prevent_numeric_default()
    if prevent_numeric:
        if _VERSION_RE.match(value):
            return "looks like version number"
        if _NUMERIC_RE.match(value):
            return "purely numeric"
        digits = sum(1 for ch in value if ch.isdigit())
        if digits / len(value) >= 0.5:
            return "too many digits (>=50%)"

    if not any(ch.isalpha() for ch in value):
        return "contains no letters"
    if not value[0].isalpha():
        return "does not start with a letter"

    return "valid"


def is_valid_category(candidate: str | None, *, prevent_numeric: bool | None = None) -> bool:
    """True when *candidate* may be stored as a category name."""
    return rejection_reason(candidate, prevent_numeric=prevent_numeric) == "valid"

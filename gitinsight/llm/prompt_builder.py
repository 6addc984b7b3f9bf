"""Provider-agnostic categorization prompt.

The RESPONSE FORMAT block of ``commit_categorization_v1.md`` is the contract
``response_parser`` depends on; keep the two in step.
"""

from __future__ import annotations

from typing import Sequence

from gitinsight.prompts.loader import render_prompt
from gitinsight.schemas.categorization import CommitContext

PROMPT_TEMPLATE = "commit_categorization_v1"

FILES_NOT_AVAILABLE = "MODIFIED FILES: (not available)"
DIFF_NOT_AVAILABLE = "DIFF: (not available)"
NO_CATEGORIES_YET = "EXISTING CATEGORIES: (none yet - you can create the first one)"
TRUNCATED_LABEL = " [TRUNCATED TO 10KB]"


def _files_section(files: Sequence[str]) -> str:
    if not files:
        return FILES_NOT_AVAILABLE
    return "MODIFIED FILES:\n" + "\n".join(f"- {path}" for path in files)


def _diff_section(diff: str | None, truncated: bool) -> str:
    if diff is None:
        return DIFF_NOT_AVAILABLE
    label = TRUNCATED_LABEL if truncated else ""
    return f"DIFF (changes made){label}:\n```\n{diff}\n```"


def _categories_section(existing_categories: Sequence[str]) -> str:
    if not existing_categories:
        return NO_CATEGORIES_YET
    return "EXISTING CATEGORIES (prefer these):\n" + ", ".join(existing_categories)


def build_categorization_prompt(
    commit: CommitContext, existing_categories: Sequence[str]
) -> str:
    """Render the instruction prompt for one commit. Deterministic, no side effects."""
    return render_prompt(
        PROMPT_TEMPLATE,
        SUBJECT=commit.subject,
        HASH=commit.hash,
        FILES_SECTION=_files_section(commit.files),
        DIFF_SECTION=_diff_section(commit.diff, commit.diff_truncated),
        CATEGORIES_SECTION=_categories_section(existing_categories),
    )

"""
Prompt templates stored as .md files next to this module.

A template is plain text with ``{{UPPER_SNAKE}}`` placeholders. Rendering
fills every placeholder in one pass; supplying too few variables is an error,
supplying extra ones only logs a warning.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent

_PLACEHOLDER_RE = re.compile(r"\{\{([A-Z_][A-Z0-9_]*)\}\}")
# Bare file stem only; keeps lookups inside TEMPLATES_DIR.
_SAFE_NAME_RE = re.compile(r"^[a-zA-Z0-9_.-]+$")


def template_placeholders(content: str) -> set[str]:
    return set(_PLACEHOLDER_RE.findall(content))


@lru_cache(maxsize=64)
def load_prompt(template_name: str) -> str:
    """Return the raw text of ``<template_name>.md``.

    Raises:
        ValueError: *template_name* is not a bare file stem.
        FileNotFoundError: no such template; the message lists the ones that exist.
    """
    if not _SAFE_NAME_RE.match(template_name):
        raise ValueError(f"Invalid prompt template name: {template_name!r}")
    path = TEMPLATES_DIR / f"{template_name}.md"
    if path.is_file():
        return path.read_text(encoding="utf-8")
    known = sorted(p.stem for p in TEMPLATES_DIR.glob("*.md"))
    raise FileNotFoundError(
        f"Prompt template '{template_name}' not found at {path}. Available templates: {known}"
    )


def render_template(template_content: str, template_name: str, **variables: str) -> str:
    """Substitute *variables* into *template_content*.

    Values are inserted verbatim, so a diff or subject that itself contains
    ``{{SOMETHING}}`` comes through untouched.
    """
    wanted = template_placeholders(template_content)
    unused = sorted(set(variables) - wanted)
    for name in unused:
        logger.warning("Variable '%s' provided but not found in template '%s'", name, template_name)

    missing = sorted(wanted - set(variables))
    if missing:
        raise ValueError(
            f"Unfilled placeholders in template '{template_name}': {missing}. "
            "Provide these as keyword arguments."
        )
    return _PLACEHOLDER_RE.sub(lambda m: str(variables[m.group(1)]), template_content)


def render_prompt(template_name: str, **variables: str) -> str:
    """``load_prompt`` followed by ``render_template``."""
    return render_template(load_prompt(template_name), template_name, **variables)

"""Pydantic schemas and plain data types."""

from gitinsight.schemas.categorization import (
    CategorizationResult,
    CategorizationStats,
    CommitContext,
    CommitRow,
)

__all__ = [
    "CategorizationResult",
    "CategorizationStats",
    "CommitContext",
    "CommitRow",
]

"""Schemas for commit categorization input, output and run statistics."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONFIDENCE = 50
DEFAULT_BUSINESS_IMPACT = 100
DEFAULT_REASON = "No reason provided"


class CommitContext(BaseModel):
    """Commit details handed to the LLM for one categorization call."""

    model_config = ConfigDict(frozen=True)

    hash: str
    subject: str
    files: list[str] = Field(default_factory=list)
    diff: str | None = None
    diff_truncated: bool = False


class CategorizationResult(BaseModel):
    """Structured outcome of one categorization (parsed from LLM text)."""

    category: str = Field(..., min_length=1)
    confidence: int = Field(DEFAULT_CONFIDENCE, ge=0, le=100)
    business_impact: int = Field(DEFAULT_BUSINESS_IMPACT, ge=0, le=100)
    reason: str = DEFAULT_REASON
    description: str | None = None


class CommitRow(BaseModel):
    """A stored commit selected for categorization."""

    model_config = ConfigDict(from_attributes=True)

    hash: str
    subject: str
    repository_id: int


@dataclass
class CategorizationStats:
    """Counters for one orchestrator instance. Only ever incremented."""

    processed: int = 0
    categorized: int = 0
    errors: int = 0
    new_categories: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)

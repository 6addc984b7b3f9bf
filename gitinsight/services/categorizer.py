"""Commit categorization orchestrator.

Drives an LLM client over batches of stored commits: one storage transaction
per chunk, commits handled strictly one after another, new categories
persisted as they appear, and run-wide counters kept in ``stats``.

Failure scopes:

- LLM errors (timeout, API, unparseable or invalid category) and per-commit
  storage errors are counted against the commit; the chunk carries on.
- A storage error escaping the chunk's transaction (open or commit failure,
  lost connection) rolls the chunk back and counts every commit in it as an
  error.

The list of known categories is loaded once per run and only extended in
memory. Two runs against the same database may both try to create the same
new category; storage treats creation as insert-if-absent, so the loser's
attempt is a no-op rather than a duplicate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from sqlalchemy.exc import SQLAlchemyError

from gitinsight.llm.client import CommitCategorizationClient
from gitinsight.llm.provider import LLMError
from gitinsight.schemas.categorization import (
    DEFAULT_REASON,
    CategorizationResult,
    CategorizationStats,
    CommitContext,
    CommitRow,
)
from gitinsight.services.category_store import CategoryStore
from gitinsight.services.export_lookup import SourceContextLookup

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
DEFAULT_CATEGORY_DESCRIPTION = "Created by AI categorization"


def _chunks(items: Sequence[CommitRow], size: int) -> Iterator[Sequence[CommitRow]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class Categorizer:
    """Applies LLM categorizations to commits and keeps run statistics."""

    def __init__(self, client: CommitCategorizationClient, store: CategoryStore) -> None:
        self.client = client
        self.store = store
        self.stats = CategorizationStats()

    def fetch_existing_categories(self) -> list[str]:
        return self.store.fetch_category_names()

    def categorize_commits(
        self,
        commits: Sequence[CommitRow],
        source_lookup: SourceContextLookup,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> CategorizationStats:
        """Categorize *commits* in chunks of *batch_size*; returns ``self.stats``.

        Recoverable failures are counted, never raised.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        existing_categories = self.fetch_existing_categories()
        for chunk in _chunks(commits, batch_size):
            self._process_chunk(chunk, source_lookup, existing_categories)
        return self.stats

    def preview(
        self,
        commits: Sequence[CommitRow],
        source_lookup: SourceContextLookup,
        limit: int = 5,
    ) -> list[tuple[CommitRow, CategorizationResult | None, LLMError | None]]:
        """Categorize the first *limit* commits without writing anything (dry run)."""
        existing_categories = self.fetch_existing_categories()
        outcomes: list[tuple[CommitRow, CategorizationResult | None, LLMError | None]] = []
        for commit in commits[:limit]:
            try:
                result = self.client.categorize(
                    self._context_for(commit, source_lookup), existing_categories
                )
            except LLMError as e:
                outcomes.append((commit, None, e))
            else:
                outcomes.append((commit, result, None))
        return outcomes

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _process_chunk(
        self,
        chunk: Sequence[CommitRow],
        source_lookup: SourceContextLookup,
        existing_categories: list[str],
    ) -> None:
        # Chunk-local tally; merged only once the transaction has committed.
        tally = CategorizationStats()
        known_before = len(existing_categories)
        try:
            with self.store.transaction():
                for commit in chunk:
                    self._process_commit(commit, source_lookup, existing_categories, tally)
        except SQLAlchemyError as e:
            logger.error("Batch transaction failed (%d commits): %s", len(chunk), e)
            # Categories created in this chunk were rolled back with it.
            del existing_categories[known_before:]
            self.stats.errors += len(chunk)
            return

        self.stats.categorized += tally.categorized
        self.stats.errors += tally.errors
        self.stats.new_categories += tally.new_categories

    def _process_commit(
        self,
        commit: CommitRow,
        source_lookup: SourceContextLookup,
        existing_categories: list[str],
        tally: CategorizationStats,
    ) -> None:
        self.stats.processed += 1
        try:
            result = self.client.categorize(
                self._context_for(commit, source_lookup), existing_categories
            )

            if result.category not in existing_categories:
                self._save_category(result, existing_categories, tally)

            with self.store.savepoint():
                self.store.update_commit_category(
                    commit.hash, result.category, result.confidence, commit.repository_id
                )
                self.store.increment_category_usage(result.category)
        except LLMError as e:
            logger.warning("LLM error for commit %s: %s", commit.hash, e)
            tally.errors += 1
            return
        except SQLAlchemyError as e:
            logger.warning("Failed to update commit %s: %s", commit.hash, e)
            tally.errors += 1
            return
        except Exception:
            logger.exception("Unexpected error for commit %s", commit.hash)
            tally.errors += 1
            return

        tally.categorized += 1
        logger.debug(
            "%s: %s (confidence: %d%%) subject=%r reason=%r",
            commit.hash[:8],
            result.category,
            result.confidence,
            commit.subject,
            result.reason,
        )

    def _save_category(
        self,
        result: CategorizationResult,
        existing_categories: list[str],
        tally: CategorizationStats,
    ) -> None:
        description = result.reason
        if not description or description == DEFAULT_REASON:
            description = DEFAULT_CATEGORY_DESCRIPTION
        try:
            with self.store.savepoint():
                created = self.store.create_category_if_absent(result.category, description)
        except SQLAlchemyError as e:
            logger.warning("Failed to save category %s: %s", result.category, e)
            return

        existing_categories.append(result.category)
        if created:
            tally.new_categories += 1
            logger.info("New category created: %s", result.category)

    @staticmethod
    def _context_for(commit: CommitRow, source_lookup: SourceContextLookup) -> CommitContext:
        return CommitContext(
            hash=commit.hash,
            subject=commit.subject,
            files=source_lookup.files_for_commit(commit.hash),
        )

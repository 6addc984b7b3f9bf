"""Storage collaborator for the categorizer.

``SqlCategoryStore`` is the SQLAlchemy implementation. Category creation is
``INSERT ... ON CONFLICT (name) DO NOTHING`` and usage counts are bumped with
a single ``UPDATE``, so concurrent categorizer runs sharing one database
cannot create duplicate categories or lose increments.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from gitinsight.models.category import Category
from gitinsight.models.commit import Commit

logger = logging.getLogger(__name__)

_CONFLICT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CategoryStore(Protocol):
    """Operations the categorizer needs from storage."""

    def fetch_category_names(self) -> list[str]: ...

    def create_category_if_absent(self, name: str, description: str) -> bool: ...

    def update_commit_category(
        self, commit_hash: str, category: str, confidence: int, repository_id: int
    ) -> None: ...

    def increment_category_usage(self, name: str) -> None: ...

    def transaction(self): ...

    def savepoint(self): ...


class SqlCategoryStore:
    """``CategoryStore`` over a SQLAlchemy session (PostgreSQL or SQLite)."""

    def __init__(self, db: Session) -> None:
        dialect = db.get_bind().dialect.name
        if dialect not in _CONFLICT_INSERTS:
            raise ValueError(f"Unsupported database dialect for category storage: {dialect}")
        self.db = db
        self._insert = _CONFLICT_INSERTS[dialect]

    def fetch_category_names(self) -> list[str]:
        """All category names, most used first, ties by name."""
        stmt = select(Category.name).order_by(Category.usage_count.desc(), Category.name.asc())
        return list(self.db.scalars(stmt))

    def create_category_if_absent(self, name: str, description: str) -> bool:
        """Insert *name* with usage_count 1. Returns False if it already existed."""
        stmt = (
            self._insert(Category.__table__)
            .values(name=name, description=description, usage_count=1)
            .on_conflict_do_nothing(index_elements=["name"])
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def update_commit_category(
        self, commit_hash: str, category: str, confidence: int, repository_id: int
    ) -> None:
        self.db.execute(
            update(Commit)
            .where(Commit.hash == commit_hash, Commit.repository_id == repository_id)
            .values(category=category, ai_confidence=confidence)
        )

    def increment_category_usage(self, name: str) -> None:
        self.db.execute(
            update(Category)
            .where(Category.name == name)
            .values(usage_count=Category.usage_count + 1)
        )

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit everything written inside the block, or roll it all back and re-raise."""
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    @contextmanager
    def savepoint(self) -> Iterator[None]:
        """Nested transaction: a failure undoes only the writes made inside it."""
        with self.db.begin_nested():
            yield

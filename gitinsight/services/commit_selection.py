"""Selection of repositories and commits for a categorization run."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from gitinsight.models.commit import Commit
from gitinsight.models.repository import Repository
from gitinsight.schemas.categorization import CommitRow


def fetch_repositories(db: Session, name: str | None = None) -> list[Repository]:
    """All repositories ordered by name, or just the one called *name* (may be empty)."""
    stmt = select(Repository).order_by(Repository.name)
    if name is not None:
        stmt = stmt.where(Repository.name == name)
    return list(db.scalars(stmt))


def fetch_commits_to_categorize(
    db: Session,
    repository_id: int,
    *,
    force: bool = False,
    limit: int | None = None,
) -> list[CommitRow]:
    """Commits of a repository, newest first.

    Only uncategorized commits unless *force* is set.
    """
    stmt = (
        select(Commit.hash, Commit.subject, Commit.repository_id)
        .where(Commit.repository_id == repository_id)
        .order_by(Commit.commit_date.desc())
    )
    if not force:
        stmt = stmt.where(Commit.category.is_(None))
    if limit is not None:
        stmt = stmt.limit(limit)
    return [CommitRow(**row._asdict()) for row in db.execute(stmt)]

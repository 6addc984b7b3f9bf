"""SQLAlchemy models."""

from gitinsight.models.category import Category
from gitinsight.models.commit import Commit
from gitinsight.models.repository import Repository

__all__ = [
    "Category",
    "Commit",
    "Repository",
]

"""Source-context lookup: which files did a commit touch?

The git extractor writes one JSON export per repository
(``<exports_dir>/<repo>.json``) shaped like::

    {"commits": [{"hash": "abc123", "files": [{"filename": "app/x.rb"}, ...]}, ...]}

File entries carry ``filename`` or ``path`` (older exports keep a trailing
newline on the name).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class SourceContextLookup(Protocol):
    def files_for_commit(self, commit_hash: str) -> list[str]: ...


class EmptyLookup:
    """Lookup with no source context; every commit has no known files."""

    def files_for_commit(self, commit_hash: str) -> list[str]:
        return []


def _file_path(entry: Any) -> str | None:
    if isinstance(entry, str):
        return entry.strip() or None
    if isinstance(entry, dict):
        value = entry.get("filename") or entry.get("path")
        if value:
            return str(value).strip() or None
    return None


class JsonExportLookup:
    """Index of commit hash -> modified file paths built from a JSON export."""

    def __init__(self, data: dict[str, Any]) -> None:
        self._files: dict[str, list[str]] = {}
        for commit in data.get("commits") or []:
            commit_hash = commit.get("hash")
            if not commit_hash or commit_hash in self._files:
                continue
            paths = (_file_path(entry) for entry in commit.get("files") or [])
            self._files[commit_hash] = [p for p in paths if p]

    def __len__(self) -> int:
        return len(self._files)

    @classmethod
    def from_file(cls, path: str | Path) -> JsonExportLookup:
        with open(path, encoding="utf-8") as fh:
            return cls(json.load(fh))

    @classmethod
    def for_repository(cls, exports_dir: str | Path, repo_name: str) -> JsonExportLookup | None:
        """Load ``<exports_dir>/<repo_name>.json``; None when the export is missing."""
        path = Path(exports_dir) / f"{repo_name}.json"
        if not path.is_file():
            logger.warning("JSON export not found: %s", path)
            return None
        return cls.from_file(path)

    def files_for_commit(self, commit_hash: str) -> list[str]:
        return list(self._files.get(commit_hash, []))

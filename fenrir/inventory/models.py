"""Data models for tree inventories."""

from __future__ import annotations

import os
import posixpath
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field


def normalize_relpath(path: str) -> str:
    """Normalize a tree-relative path to its canonical join-key form.

    The platform separator becomes ``/`` and redundant ``.`` segments and
    duplicate separators are collapsed. Every other character, including
    whitespace and (on POSIX) backslashes, is part of the filename and is
    kept. Raises ValueError for paths that are absolute, empty, or climb out
    of the tree with ``..``.
    """
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    if not path:
        raise ValueError("relative path is empty")
    if path.startswith("/"):
        raise ValueError(f"path is not relative: {path!r}")
    norm = posixpath.normpath(path)
    if norm == "." or norm == ".." or norm.startswith("../"):
        raise ValueError(f"path escapes its tree: {path!r}")
    return norm


@dataclass(frozen=True)
class FileRecord:
    """Digest and mode bits of one regular file.

    ``None`` in either field means the value could not be read; the reason
    is kept in ``errors``.
    """

    digest: str | None = None
    permissions: int | None = None
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class EntryError:
    """An entry that could not be inventoried or read completely."""

    tree: str
    path: str
    message: str


@dataclass
class Inventory(Mapping[str, FileRecord]):
    """Mapping from normalized relative path to FileRecord for one tree."""

    root: str
    records: dict[str, FileRecord] = field(default_factory=dict)
    errors: list[EntryError] = field(default_factory=list)

    def add(self, rel_path: str, record: FileRecord) -> str:
        """Store *record* under the normalized form of *rel_path*."""
        key = normalize_relpath(rel_path)
        self.records[key] = record
        return key

    def __getitem__(self, key: str) -> FileRecord:
        return self.records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

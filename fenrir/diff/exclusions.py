"""Loading hash/permission exclusion lists."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from fenrir.errors import ConfigurationError
from fenrir.inventory.models import normalize_relpath

logger = logging.getLogger(__name__)


def read_exclusion_file(file_path: Path | str | None) -> list[str]:
    """Return the raw entries of an exclusion file, one per non-blank line.

    An empty or unset *file_path* means "exclude nothing" and returns an
    empty list without touching the filesystem. A named file that cannot be
    read raises ConfigurationError. Lines starting with ``#`` are comments.
    """
    if not file_path:
        return []
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ConfigurationError(f"Cannot read exclusion file {path}: {e}") from e

    entries: list[str] = []
    for line in text.splitlines():
        entry = line.strip()
        if not entry or entry.startswith("#"):
            continue
        entries.append(entry)
    return entries


def normalize_exclusions(entries: Iterable[str], roots: Iterable[Path | str] = ()) -> frozenset[str]:
    """Turn raw entries into a set of normalized tree-relative paths.

    Entries are hand-written, so surrounding whitespace is dropped and
    ``\\`` is read as a separator. Relative entries are then normalized
    as-is. Absolute entries are rewritten relative to whichever of *roots*
    contains them; absolute entries outside every root, and entries that
    climb out of the tree, are dropped with a warning.
    """
    resolved_roots = [Path(r).resolve() for r in roots]
    result: set[str] = set()
    for entry in entries:
        candidate = entry.strip().replace("\\", "/")
        if Path(candidate).is_absolute():
            mapped = _relative_to_any(Path(candidate), resolved_roots)
            if mapped is None:
                logger.warning("exclusion %r is not under any tree root, ignoring", entry)
                continue
            candidate = mapped
        try:
            result.add(normalize_relpath(candidate))
        except ValueError as e:
            logger.warning("ignoring malformed exclusion %r: %s", entry, e)
    return frozenset(result)


def _relative_to_any(path: Path, roots: list[Path]) -> str | None:
    for root in roots:
        for candidate in (path, path.resolve()):
            if candidate.is_relative_to(root) and candidate != root:
                return candidate.relative_to(root).as_posix()
    return None


def load_exclusions(
    file_path: Path | str | None,
    roots: Iterable[Path | str] = (),
) -> frozenset[str]:
    """Read an exclusion file and return its normalized entry set."""
    entries = read_exclusion_file(file_path)
    excluded = normalize_exclusions(entries, roots)
    if file_path:
        logger.info("loaded %d exclusion(s) from %s", len(excluded), file_path)
    return excluded

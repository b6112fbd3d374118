"""Build an Inventory by walking a directory tree on disk."""

from __future__ import annotations

import logging
import os
import stat
import time
from pathlib import Path

from fenrir.errors import FileReadError, RootWalkError
from fenrir.inventory.hasher import (
    DEFAULT_ALGORITHM,
    DEFAULT_CHUNK_SIZE,
    compute_file_digest,
    read_permissions,
)
from fenrir.inventory.models import EntryError, FileRecord, Inventory

logger = logging.getLogger(__name__)


class InventoryBuilder:
    """Walks a tree root and records every regular file under it.

    Directories are descended into but never stored. Symlinks to files are
    followed; symlinked directories are not descended (``os.walk`` default).
    """

    def __init__(
        self,
        algorithm: str = DEFAULT_ALGORITHM,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        *,
        hash_content: bool = True,
        read_modes: bool = True,
    ) -> None:
        self.algorithm = algorithm
        self.chunk_size = chunk_size
        self.hash_content = hash_content
        self.read_modes = read_modes

    def build(self, root: Path | str) -> Inventory:
        """Walk *root* and return its inventory.

        Raises RootWalkError if the root itself cannot be listed. Failures
        on individual entries are logged, recorded on ``inventory.errors``
        and do not stop the walk.
        """
        root_path = Path(root).resolve()
        root_str = str(root_path)
        if not root_path.is_dir():
            raise RootWalkError(root_str, NotADirectoryError(f"not a directory: {root_str}"))

        inventory = Inventory(root=root_str)
        started = time.perf_counter()

        def _on_walk_error(err: OSError) -> None:
            if err.filename is None or os.path.abspath(err.filename) == root_str:
                raise RootWalkError(root_str, err)
            self._record_error(inventory, err.filename, f"cannot list directory: {err.strerror or err}")

        for dirpath, _dirnames, filenames in os.walk(root_str, onerror=_on_walk_error):
            for name in filenames:
                full = os.path.join(dirpath, name)
                rel = os.path.relpath(full, root_str)
                try:
                    st = os.stat(full)
                except OSError as e:
                    # dangling symlink, or the entry vanished since listing
                    self._record_error(inventory, full, f"cannot stat entry: {e.strerror or e}")
                    continue
                if not stat.S_ISREG(st.st_mode):
                    logger.debug("skipping non-regular entry %s", full)
                    continue
                record = self._read_record(inventory, full)
                try:
                    inventory.add(rel, record)
                except ValueError as e:
                    self._record_error(inventory, full, f"unusable relative path: {e}")

        logger.info(
            "inventoried %d file(s) under %s in %.2fs (%d error(s))",
            len(inventory),
            root_str,
            time.perf_counter() - started,
            len(inventory.errors),
        )
        return inventory

    def _read_record(self, inventory: Inventory, full: str) -> FileRecord:
        digest: str | None = None
        permissions: int | None = None
        errors: list[str] = []

        if self.hash_content:
            try:
                digest = compute_file_digest(full, self.algorithm, self.chunk_size)
            except FileReadError as e:
                errors.append(str(e))
                self._record_error(inventory, full, str(e))

        if self.read_modes:
            try:
                permissions = read_permissions(full)
            except FileReadError as e:
                errors.append(str(e))
                self._record_error(inventory, full, str(e))

        return FileRecord(digest=digest, permissions=permissions, errors=tuple(errors))

    @staticmethod
    def _record_error(inventory: Inventory, full: str, message: str) -> None:
        logger.warning("%s: %s", full, message)
        inventory.errors.append(EntryError(tree=inventory.root, path=full, message=message))


def build_inventory(root: Path | str, **kwargs) -> Inventory:
    """Convenience wrapper around InventoryBuilder().build()."""
    return InventoryBuilder(**kwargs).build(root)

"""Content digests and permission bits for single files."""

from __future__ import annotations

import hashlib
import os
import stat
from pathlib import Path

from fenrir.errors import FileReadError

DEFAULT_ALGORITHM = "sha256"
DEFAULT_CHUNK_SIZE = 64 * 1024


def compute_hash(content: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Hex digest of an in-memory byte string."""
    return hashlib.new(algorithm, content).hexdigest()


def compute_file_digest(
    path: Path | str,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    """Stream a file from disk and return its hex digest.

    Only the bytes are hashed, so the result is independent of the path,
    timestamps and mode bits. Raises FileReadError if the file cannot be
    opened or a read fails partway through.
    """
    hasher = hashlib.new(algorithm)
    try:
        with open(path, "rb") as handle:
            for chunk in iter(lambda: handle.read(chunk_size), b""):
                hasher.update(chunk)
    except OSError as e:
        raise FileReadError(str(path), "digest", e) from e
    return hasher.hexdigest()


def read_permissions(path: Path | str) -> int:
    """Return the access-mode bits of *path*, setuid/setgid/sticky included.

    Symlinks are followed. Raises FileReadError when the file cannot be
    stat'ed.
    """
    try:
        st = os.stat(path)
    except OSError as e:
        raise FileReadError(str(path), "permissions", e) from e
    return stat.S_IMODE(st.st_mode)

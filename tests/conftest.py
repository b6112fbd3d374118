"""Shared test fixtures for fenrir."""

import os
from pathlib import Path

import pytest

from fenrir.config.models import FenrirConfig, LogConfig


def make_tree(root: Path, files: dict[str, str | tuple[str, int]]) -> Path:
    """Create *files* under *root*.

    Values are either file content, or ``(content, mode)`` to also chmod.
    """
    root.mkdir(parents=True, exist_ok=True)
    for rel, entry in files.items():
        content, mode = (entry, 0o644) if isinstance(entry, str) else entry
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        os.chmod(path, mode)
    return root


@pytest.fixture
def base_dir(tmp_path):
    return tmp_path / "base"


@pytest.fixture
def target_dir(tmp_path):
    return tmp_path / "target"


@pytest.fixture
def log_dir(tmp_path):
    d = tmp_path / "logs"
    d.mkdir()
    return d


@pytest.fixture
def sample_config(log_dir):
    return FenrirConfig(logs=LogConfig(directory=str(log_dir)))


@pytest.fixture
def tree():
    """Factory fixture: ``tree(root, {"a.txt": "X"})``."""
    return make_tree

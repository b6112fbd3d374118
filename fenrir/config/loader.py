"""Locate and parse fenrir.yaml into a FenrirConfig."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from fenrir.errors import ConfigurationError

from .models import FenrirConfig

PROJECT_CONFIG = Path("fenrir.yaml")
_ENV_REF = re.compile(r"\$\{(\w+)\}")


def config_search_paths(cli_path: str | None = None) -> list[Path]:
    """Candidate config files, highest precedence first.

    ``--config`` wins, then ``./fenrir.yaml``, then ``~/.fenrir/config.yaml``.
    """
    paths = [PROJECT_CONFIG, Path.home() / ".fenrir" / "config.yaml"]
    if cli_path:
        paths.insert(0, Path(cli_path))
    return paths


def find_config_file(cli_path: str | None = None) -> Path | None:
    """Return the first config file that exists and is not empty, if any.

    A ``--config`` path that does not exist is an error rather than a miss.
    """
    if cli_path and not Path(cli_path).is_file():
        raise ConfigurationError(f"Config file not found: {cli_path}")
    for path in config_search_paths(cli_path):
        if path.is_file() and _read_raw(path) is not None:
            return path
    return None


def load_config(cli_path: str | None = None) -> FenrirConfig:
    """Build the run configuration from the first usable config file.

    Falls back to built-in defaults (compare everything, logs in the current
    directory) when no file is found. Raises ConfigurationError for
    unreadable YAML or values the schema rejects.
    """
    path = find_config_file(cli_path)
    if path is None:
        return FenrirConfig()
    raw = _expand_env_vars(_read_raw(path))
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config in {path} must be a mapping")
    try:
        return FenrirConfig(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config in {path}: {e}") from e


def _read_raw(path: Path) -> object:
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e


def _expand_env_vars(obj: object) -> object:
    """Substitute ${VAR} in string values; unset variables become ""."""
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `fenrir config init`
DEFAULT_CONFIG_TEMPLATE = """\
# fenrir.yaml

# Content digests
hashing:
  algorithm: "sha256"          # sha256 | sha3_256 | blake2s
  chunk_size: 65536            # bytes per read

# Exclusion lists (one tree-relative path per line)
exclusions:
  # hash_file: "exhash.txt"
  # permission_file: "experm.txt"
  suppress_one_sided: true     # excluded paths missing on one side are not reported

# Append-only finding logs
logs:
  directory: "."
  conflicts: "conflicts.log"
  permission_conflicts: "permission_conflicts.log"
  target_only: "target_specific.log"
  base_only: "base_specific.log"

# Skip a whole comparison axis
ignore_hashes: false
ignore_permissions: false

show_matches: true

# Logging
log_level: "warn"              # debug | info | warn | error
"""

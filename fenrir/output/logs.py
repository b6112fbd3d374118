"""Append-only finding logs and their maintenance."""

from __future__ import annotations

import logging
from pathlib import Path

from fenrir.config.models import LogConfig
from fenrir.diff.models import Finding, FindingKind

logger = logging.getLogger(__name__)


def format_log_line(finding: Finding, base_root: str, target_root: str) -> str:
    """Render the log line for an alert finding (without newline)."""
    if finding.kind is FindingKind.BASE_ONLY:
        line = f"{base_root}/{finding.path}"
    else:
        line = f"{target_root}/{finding.path}"
    if finding.kind is FindingKind.PERMISSION_CONFLICT:
        line += f" (base: {_octal(finding.base_permissions)}, target: {_octal(finding.target_permissions)})"
    if finding.detail:
        line += f" [{finding.detail}]"
    return line


def _octal(mode: int | None) -> str:
    return "unavailable" if mode is None else f"{mode:o}"


class LogFileSink:
    """Appends one line per alert finding to the log file for its kind.

    Matched findings are ignored. Each append opens and closes the file, so
    no handle outlives a single write. Write failures are logged and kept in
    ``write_errors``; they never propagate.
    """

    def __init__(self, config: LogConfig, base_root: str, target_root: str) -> None:
        self.base_root = base_root
        self.target_root = target_root
        directory = Path(config.directory)
        self.paths: dict[FindingKind, Path] = {
            FindingKind.CHECKSUM_CONFLICT: directory / config.conflicts,
            FindingKind.PERMISSION_CONFLICT: directory / config.permission_conflicts,
            FindingKind.TARGET_ONLY: directory / config.target_only,
            FindingKind.BASE_ONLY: directory / config.base_only,
        }
        self.write_errors: list[str] = []

    def emit(self, finding: Finding) -> None:
        dest = self.paths.get(finding.kind)
        if dest is None:
            return
        line = format_log_line(finding, self.base_root, self.target_root)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            with open(dest, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            msg = f"cannot append to {dest}: {e}"
            logger.error(msg)
            self.write_errors.append(msg)


def log_paths(config: LogConfig) -> list[Path]:
    directory = Path(config.directory)
    return [directory / name for name in config.artifact_names()]


def clear_logs(config: LogConfig) -> list[Path]:
    """Remove the four finding logs. Missing files are fine.

    Returns the paths that were actually removed.
    """
    removed: list[Path] = []
    for path in log_paths(config):
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        removed.append(path)
        logger.debug("removed %s", path)
    return removed

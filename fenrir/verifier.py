"""One verification run: resolve config, inventory both trees, diff, emit."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, Field, computed_field

from fenrir.config.models import FenrirConfig
from fenrir.diff.engine import InventoryDiffer
from fenrir.diff.exclusions import load_exclusions
from fenrir.diff.models import DiffOptions, FindingKind
from fenrir.errors import ConfigurationError
from fenrir.inventory.builder import InventoryBuilder
from fenrir.inventory.models import EntryError
from fenrir.output.logs import LogFileSink
from fenrir.output.sink import CompositeSink, FindingSink

logger = logging.getLogger(__name__)


class EntryErrorReport(BaseModel):
    tree: str
    path: str
    message: str


class VerificationReport(BaseModel):
    """Summary of a finished run."""

    base_root: str
    target_root: str
    counts: dict[str, int] = Field(default_factory=lambda: {k.value: 0 for k in FindingKind})
    entry_errors: list[EntryErrorReport] = Field(default_factory=list)
    log_errors: list[str] = Field(default_factory=list)
    alerts: int = 0

    @computed_field
    @property
    def clean(self) -> bool:
        return self.alerts == 0 and not self.entry_errors

    def count(self, kind: FindingKind) -> int:
        return self.counts.get(kind.value, 0)


def resolve_root(path: Path | str | None, label: str) -> Path:
    """Resolve a tree root, raising ConfigurationError if it is unusable."""
    if not path:
        raise ConfigurationError(f"{label} directory is required")
    resolved = Path(path).expanduser().resolve()
    if not resolved.exists():
        raise ConfigurationError(f"{label} directory does not exist: {resolved}")
    if not resolved.is_dir():
        raise ConfigurationError(f"{label} path is not a directory: {resolved}")
    return resolved


class Verifier:
    """Compares a base tree against a target tree under one FenrirConfig.

    Both inventories are fully built before the first finding is emitted.
    """

    def __init__(self, config: FenrirConfig | None = None) -> None:
        self.config = config or FenrirConfig()

    def run(
        self,
        base: Path | str,
        target: Path | str,
        sink: FindingSink | None = None,
        *,
        write_logs: bool = True,
        on_entry_error: Callable[[EntryError], None] | None = None,
    ) -> VerificationReport:
        """Run a full comparison and return its report.

        Raises ConfigurationError before any work if a root or a named
        exclusion file is unusable, and RootWalkError if a root cannot be
        listed. Everything else is contained to the affected path.
        """
        cfg = self.config
        base_root = resolve_root(base, "Base")
        target_root = resolve_root(target, "Target")
        roots = (base_root, target_root)

        hash_exclusions = load_exclusions(cfg.exclusions.hash_file, roots)
        perm_exclusions = load_exclusions(cfg.exclusions.permission_file, roots)

        builder = InventoryBuilder(
            cfg.hashing.algorithm,
            cfg.hashing.chunk_size,
            hash_content=not cfg.ignore_hashes,
            read_modes=not cfg.ignore_permissions,
        )
        base_inv = builder.build(base_root)
        target_inv = builder.build(target_root)

        report = VerificationReport(base_root=str(base_root), target_root=str(target_root))
        for err in [*base_inv.errors, *target_inv.errors]:
            report.entry_errors.append(EntryErrorReport(tree=err.tree, path=err.path, message=err.message))
            if on_entry_error is not None:
                on_entry_error(err)

        sinks: list[FindingSink] = []
        log_sink: LogFileSink | None = None
        if write_logs:
            log_sink = LogFileSink(cfg.logs, str(base_root), str(target_root))
            sinks.append(log_sink)
        if sink is not None:
            sinks.append(sink)
        out = CompositeSink(*sinks)

        differ = InventoryDiffer(
            DiffOptions(
                ignore_hashes=cfg.ignore_hashes,
                ignore_permissions=cfg.ignore_permissions,
                suppress_one_sided=cfg.exclusions.suppress_one_sided,
            )
        )
        for finding in differ.diff(base_inv, target_inv, hash_exclusions, perm_exclusions):
            out.emit(finding)
            report.counts[finding.kind.value] += 1
            if finding.kind.is_alert:
                report.alerts += 1

        if log_sink is not None:
            report.log_errors.extend(log_sink.write_errors)

        logger.info(
            "compared %s against %s: %d alert(s), %d entry error(s)",
            target_root,
            base_root,
            report.alerts,
            len(report.entry_errors),
        )
        return report


def verify(
    base: Path | str,
    target: Path | str,
    config: FenrirConfig | None = None,
    sink: FindingSink | None = None,
    **kwargs,
) -> VerificationReport:
    """Convenience wrapper around Verifier(config).run()."""
    return Verifier(config).run(base, target, sink, **kwargs)

"""Human-readable and plain-text console sinks."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from fenrir.diff.models import Finding, FindingKind
from fenrir.inventory.models import EntryError

_OK = "[green]\\[OK][/green]"
_ALERT = "[red]\\[ALERT][/red]"
_FAIL = "[red]\\[FAIL][/red]"


def _path(text: str) -> str:
    return f"[cyan]{escape(text)}[/cyan]"


def _mode(mode: int | None) -> str:
    return "?" if mode is None else f"{mode:o}"


class ConsoleSink:
    """Prints one rich status line per finding."""

    def __init__(
        self,
        console: Console,
        base_root: str,
        target_root: str,
        *,
        show_matches: bool = True,
    ) -> None:
        self.console = console
        self.base_root = base_root
        self.target_root = target_root
        self.show_matches = show_matches

    def emit(self, finding: Finding) -> None:
        if not finding.kind.is_alert and not self.show_matches:
            return
        self.console.print(self.render(finding), soft_wrap=True, highlight=False)

    def render(self, finding: Finding) -> str:
        base = f"{self.base_root}/{finding.path}"
        target = f"{self.target_root}/{finding.path}"
        kind = finding.kind

        if kind is FindingKind.MATCHED_CONTENT:
            line = f"{_OK} File matched ({_path(base)} --> {_path(target)})"
        elif kind is FindingKind.MATCHED_PERMISSIONS:
            line = f"{_OK} Permissions matched ({_path(target)}): {_mode(finding.target_permissions)}"
        elif kind is FindingKind.CHECKSUM_CONFLICT:
            line = f"{_ALERT} Checksum conflict ({_path(target)})"
        elif kind is FindingKind.PERMISSION_CONFLICT:
            line = (
                f"{_ALERT} Permission conflict ({_path(target)}): "
                f"(base: [cyan]{_mode(finding.base_permissions)}[/cyan], "
                f"target: [cyan]{_mode(finding.target_permissions)}[/cyan])"
            )
        elif kind is FindingKind.TARGET_ONLY:
            line = f"{_ALERT} File exists in target but not in base ({_path(target)})"
        else:
            line = f"{_ALERT} File exists in base but not in target ({_path(base)})"

        if finding.detail:
            line += f" [dim]{escape(finding.detail)}[/dim]"
        return line

    def report_entry_error(self, error: EntryError) -> None:
        self.console.print(
            f"{_FAIL} Error reading entry ({_path(error.path)}): {escape(error.message)}",
            soft_wrap=True,
            highlight=False,
        )


class PlainSink:
    """Machine-readable ``KIND path`` lines, no markup."""

    def __init__(self, console: Console, *, show_matches: bool = False) -> None:
        self.console = console
        self.show_matches = show_matches

    def emit(self, finding: Finding) -> None:
        if not finding.kind.is_alert and not self.show_matches:
            return
        line = f"{finding.kind.name} {finding.path}"
        if finding.kind is FindingKind.PERMISSION_CONFLICT:
            line += f" base={_mode(finding.base_permissions)} target={_mode(finding.target_permissions)}"
        self.console.print(line, markup=False, highlight=False, soft_wrap=True)

    def report_entry_error(self, error: EntryError) -> None:
        self.console.print(f"ERROR {error.path}: {error.message}", markup=False, highlight=False, soft_wrap=True)

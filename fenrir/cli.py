"""CLI entry point for fenrir."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from fenrir.config import FenrirConfig, find_config_file, load_config
from fenrir.config.loader import DEFAULT_CONFIG_TEMPLATE, PROJECT_CONFIG
from fenrir.diff.models import FindingKind
from fenrir.errors import FenrirError
from fenrir.output import ConsoleSink, PlainSink, clear_logs
from fenrir.verifier import VerificationReport, Verifier

app = typer.Typer(
    name="fenrir",
    help="Compare a target directory tree against a trusted base by checksum and permissions.",
)

config_app = typer.Typer(help="Manage fenrir configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: FenrirConfig | None = None
_config_source: Path | None = None
_log_handler: logging.Handler | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def _get_config() -> FenrirConfig:
    if _config is None:
        return load_config()
    return _config


def _setup_logging(level: str) -> None:
    """Route library logging to stderr through a single RichHandler."""
    global _log_handler
    root = logging.getLogger()
    if _log_handler is not None:
        root.removeHandler(_log_handler)
    _log_handler = RichHandler(console=Console(stderr=True), show_path=False)
    root.addHandler(_log_handler)
    root.setLevel(_LOG_LEVELS[level])


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to fenrir.yaml")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Global options."""
    global _config, _config_source
    try:
        _config_source = find_config_file(config)
        _config = load_config(config)
    except FenrirError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _setup_logging("debug" if verbose else _config.log_level)


_SUMMARY_ROWS = [
    (FindingKind.MATCHED_CONTENT, "Content matched", "green"),
    (FindingKind.MATCHED_PERMISSIONS, "Permissions matched", "green"),
    (FindingKind.CHECKSUM_CONFLICT, "Checksum conflicts", "red"),
    (FindingKind.PERMISSION_CONFLICT, "Permission conflicts", "red"),
    (FindingKind.TARGET_ONLY, "Only in target", "red"),
    (FindingKind.BASE_ONLY, "Only in base", "red"),
]


def _display_summary(report: VerificationReport) -> None:
    table = Table(title="Verification Summary")
    table.add_column("Finding", style="cyan")
    table.add_column("Count", justify="right")
    for kind, label, color in _SUMMARY_ROWS:
        n = report.count(kind)
        style = color if n else "dim"
        table.add_row(label, f"[{style}]{n}[/{style}]")
    table.add_row("Unreadable entries", str(len(report.entry_errors)))
    rprint(table)

    for err in report.log_errors:
        rprint(f"[yellow]Log write failed:[/yellow] {err}")

    if report.clean:
        rprint("\n[green]Target matches base.[/green]")
    else:
        rprint(f"\n[red]{report.alerts} alert(s), {len(report.entry_errors)} unreadable entr(ies).[/red]")


def _apply_overrides(
    cfg: FenrirConfig,
    *,
    hash_exclusions: str | None,
    perm_exclusions: str | None,
    ignore_hashes: bool,
    ignore_permissions: bool,
    hide_matches: bool,
    report_one_sided: bool,
    log_dir: str | None,
) -> FenrirConfig:
    """Layer CLI flags on top of the loaded config."""
    exclusions = cfg.exclusions
    if hash_exclusions is not None:
        exclusions = exclusions.model_copy(update={"hash_file": hash_exclusions})
    if perm_exclusions is not None:
        exclusions = exclusions.model_copy(update={"permission_file": perm_exclusions})
    if report_one_sided:
        exclusions = exclusions.model_copy(update={"suppress_one_sided": False})

    logs = cfg.logs
    if log_dir is not None:
        logs = logs.model_copy(update={"directory": log_dir})

    return cfg.model_copy(
        update={
            "exclusions": exclusions,
            "logs": logs,
            "ignore_hashes": cfg.ignore_hashes or ignore_hashes,
            "ignore_permissions": cfg.ignore_permissions or ignore_permissions,
            "show_matches": cfg.show_matches and not hide_matches,
        }
    )


@app.command()
def verify(
    base: Annotated[str, typer.Option("--base", "-b", help="Trusted base directory")],
    target: Annotated[str, typer.Option("--target", "-t", help="Directory to check against the base")],
    hash_exclusions: Annotated[
        str | None, typer.Option("--hash-exclusions", "--xh", help="File of paths to skip content checks for")
    ] = None,
    perm_exclusions: Annotated[
        str | None, typer.Option("--perm-exclusions", "--xp", help="File of paths to skip permission checks for")
    ] = None,
    ignore_hashes: Annotated[bool, typer.Option("--ignore-hashes", help="Skip all content checks")] = False,
    ignore_permissions: Annotated[
        bool, typer.Option("--ignore-permissions", help="Skip all permission checks")
    ] = False,
    hide_matches: Annotated[bool, typer.Option("--hide-matches", help="Only print alerts")] = False,
    report_one_sided: Annotated[
        bool,
        typer.Option(
            "--report-one-sided-exclusions",
            help="Report hash-excluded files that exist on only one side",
        ),
    ] = False,
    log_dir: Annotated[str | None, typer.Option("--log-dir", help="Directory for finding logs")] = None,
    no_logs: Annotated[bool, typer.Option("--no-logs", help="Do not append to finding logs")] = False,
    ci: Annotated[bool, typer.Option("--ci", help="Machine-readable output")] = False,
    json_out: Annotated[bool, typer.Option("--json", help="Print the run report as JSON")] = False,
    fail_on_alert: Annotated[
        bool, typer.Option("--fail-on-alert", help="Exit 1 if any alert or unreadable entry")
    ] = False,
) -> None:
    """Verify a target tree against a base tree."""
    cfg = _apply_overrides(
        _get_config(),
        hash_exclusions=hash_exclusions,
        perm_exclusions=perm_exclusions,
        ignore_hashes=ignore_hashes,
        ignore_permissions=ignore_permissions,
        hide_matches=hide_matches,
        report_one_sided=report_one_sided,
        log_dir=log_dir,
    )

    console = Console(highlight=False)
    if json_out:
        sink = None
        on_error = None
    elif ci:
        sink = PlainSink(console)
        on_error = sink.report_entry_error
    else:
        base_label = str(Path(base).expanduser().resolve())
        target_label = str(Path(target).expanduser().resolve())
        sink = ConsoleSink(console, base_label, target_label, show_matches=cfg.show_matches)
        on_error = sink.report_entry_error

    try:
        report = Verifier(cfg).run(
            base,
            target,
            sink,
            write_logs=not no_logs,
            on_entry_error=on_error,
        )
    except FenrirError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_out:
        typer.echo(report.model_dump_json(indent=2))
    elif ci:
        typer.echo(f"alerts={report.alerts} errors={len(report.entry_errors)}")
        if report.clean:
            typer.echo("OK: target matches base")
    else:
        _display_summary(report)

    if fail_on_alert and not report.clean:
        raise typer.Exit(code=1)


@app.command()
def clear(
    log_dir: Annotated[str | None, typer.Option("--log-dir", help="Directory holding finding logs")] = None,
) -> None:
    """Remove all finding logs."""
    logs = _get_config().logs
    if log_dir is not None:
        logs = logs.model_copy(update={"directory": log_dir})
    try:
        removed = clear_logs(logs)
    except OSError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    rprint(f"[green]Cleared[/green] {len(removed)} log file(s).")


@config_app.command("show")
def config_show() -> None:
    """Print the configuration a verify run would use, and where it came from."""
    cfg = _get_config()
    source = str(_config_source) if _config_source is not None else "built-in defaults"
    rprint(f"[dim]Source:[/dim] {source}")
    rprint(Syntax(yaml.safe_dump(cfg.model_dump(), default_flow_style=False, sort_keys=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing fenrir.yaml"),
) -> None:
    """Write a commented fenrir.yaml with the default settings to the current directory."""
    if PROJECT_CONFIG.exists() and not force:
        rprint(f"[yellow]{PROJECT_CONFIG} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    PROJECT_CONFIG.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {PROJECT_CONFIG}")

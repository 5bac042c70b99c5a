"""CLI commands for adding Zellij pane support to the agent CLI bundle."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from .config import DEFAULT_CONFIG_NAME, ConfigError, Settings, load_settings
from .engine import PatchReport, PatchStatus, patch_source
from .runtime import is_inside_zellij, is_zellij_available
from .tools.backup import BackupNotFound, restore_backup, write_patched
from .tools.locator import find_target

APP_HELP = (
    "Add Zellij terminal multiplexer support to agent teams by patching cli.js. "
    "When PATH is omitted, common installation locations are searched."
)

app = typer.Typer(help=APP_HELP)


def _error(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)


def _load(config: str, verbose: bool) -> Settings:
    """Load settings and configure logging for the current command."""
    try:
        settings = load_settings(Path(config))
    except ConfigError as error:
        _error(str(error))
        raise typer.Exit(code=1) from error
    level = logging.DEBUG if verbose else getattr(logging, settings.logging.level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _resolve_target(path: Optional[Path], settings: Settings) -> Path:
    """Return the explicit path or search the usual install locations."""
    if path is not None:
        resolved = path.expanduser().resolve()
        if not resolved.is_file():
            _error(f"File not found: {resolved}")
            raise typer.Exit(code=1)
        return resolved

    typer.echo("Searching for the agent CLI bundle (cli.js)...")
    found = find_target(settings.locator.search_paths)
    if found is None:
        _error("Could not find cli.js. Provide the path explicitly:\n  zpatch apply /path/to/cli.js")
        raise typer.Exit(code=1)
    typer.echo(f"Found: {found}")
    return found


def _read_source(target: Path) -> str:
    try:
        return target.read_bytes().decode("utf-8")
    except UnicodeDecodeError as error:
        _error(f"{target} is not a UTF-8 text file; native binaries cannot be patched.")
        raise typer.Exit(code=1) from error


def _run_pipeline(source: str, settings: Settings) -> PatchReport:
    return patch_source(
        source,
        lookback_window=settings.patch.lookback_window,
        pane_init_delay_ms=settings.runtime.pane_init_delay_ms,
    )


def _echo_list(title: str, entries: tuple[str, ...] | list[str], marker: str) -> None:
    if not entries:
        return
    typer.echo(f"\n{title}")
    for entry in entries:
        typer.echo(f"  {marker} {entry}")


def _zellij_status(settings: Settings) -> Dict[str, Any]:
    inside = is_inside_zellij()
    available = asyncio.run(is_zellij_available(timeout=settings.runtime.command_timeout))
    return {"inside_session": inside, "binary_available": available}


CONFIG_OPTION = typer.Option(
    DEFAULT_CONFIG_NAME,
    "--config",
    "-c",
    help="Path to an optional YAML settings file.",
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")
PATH_ARGUMENT = typer.Argument(None, help="Path to cli.js.")


@app.command()
def apply(
    path: Optional[Path] = PATH_ARGUMENT,
    config: str = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Patch cli.js in place, keeping the original as a backup."""

    settings = _load(config, verbose)
    target = _resolve_target(path, settings)
    typer.echo(f"Patching {target}...")

    report = _run_pipeline(_read_source(target), settings)
    if not report.success or report.patched_text is None:
        _error("Patch failed:")
        for failure in report.failures:
            _error(f"  - {failure}")
        _echo_list("Patches that would have been applied:", report.applied, "+")
        raise typer.Exit(code=1)

    backup, created = write_patched(target, report.patched_text, settings.patch.backup_suffix)
    if created:
        typer.echo(f"Backup created: {backup}")
    else:
        typer.echo(f"Backup already exists: {backup}")

    _echo_list("Patch applied successfully:", report.applied, "+")
    _echo_list("Warnings:", report.warnings, "!")
    typer.echo("\nZellij backend support is now active. Run the agent CLI inside a Zellij session")
    typer.echo("with CLAUDE_CODE_EXPERIMENTAL_AGENT_TEAMS=1 to use agent teams.")


@app.command()
def check(
    path: Optional[Path] = PATH_ARGUMENT,
    config: str = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Emit the patch report as JSON."),
) -> None:
    """Report whether cli.js can be patched without writing anything."""

    settings = _load(config, verbose)
    target = _resolve_target(path, settings)
    report = _run_pipeline(_read_source(target), settings)
    patchable = report.success or report.status is PatchStatus.ALREADY_PATCHED

    if as_json:
        payload = report.to_dict()
        payload["target"] = target.as_posix()
        payload["zellij"] = _zellij_status(settings)
        typer.echo(json.dumps(payload, indent=2))
        if not patchable:
            raise typer.Exit(code=1)
        return

    typer.echo(f"Checking {target}...")
    if report.status is PatchStatus.ALREADY_PATCHED:
        typer.echo("Status: Already patched with Zellij support.")
    elif report.success:
        typer.echo("Status: Ready to patch. All anchor points found.")
        _echo_list("Patches that will be applied:", report.applied, "+")
    else:
        typer.echo("Status: Cannot patch. Some anchor points not found.")
        for failure in report.failures:
            typer.echo(f"  - {failure}")
    _echo_list("Warnings:", report.warnings, "!")

    status = _zellij_status(settings)
    typer.echo(
        f"\nZellij: {'inside a session' if status['inside_session'] else 'not inside a session'}, "
        f"binary {'available' if status['binary_available'] else 'not found'}"
    )
    if not patchable:
        raise typer.Exit(code=1)


@app.command()
def restore(
    path: Optional[Path] = PATH_ARGUMENT,
    config: str = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Restore the original cli.js from its backup."""

    settings = _load(config, verbose)
    target = _resolve_target(path, settings)
    typer.echo(f"Restoring {target} from backup...")
    try:
        restore_backup(target, settings.patch.backup_suffix)
    except BackupNotFound as error:
        _error(str(error))
        raise typer.Exit(code=1) from error
    typer.echo("Original cli.js restored successfully.")


if __name__ == "__main__":
    app()

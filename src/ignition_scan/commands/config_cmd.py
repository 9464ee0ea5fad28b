"""Config commands — manage project paths and scanner settings."""

from __future__ import annotations

import os
from typing import Annotated

import typer
from rich.console import Console

from ignition_scan.commands._common import FormatOpt, resolve_format
from ignition_scan.config.manager import ConfigManager
from ignition_scan.config.models import ScannerSettings
from ignition_scan.output.formatter import output
from ignition_scan.scanner.errors import error_handler

app = typer.Typer(name="config", help="Manage project paths and scanner settings.")
console = Console()


def _get_manager() -> ConfigManager:
    return ConfigManager()


@app.command()
@error_handler
def show(fmt: FormatOpt = None) -> None:
    """Show the active configuration."""
    mgr = _get_manager()
    fmt = resolve_format(fmt, mgr)
    config = mgr.config
    data = {
        "config_file": str(mgr.config_path),
        "project_paths": mgr.resolve_project_paths(),
        "default_format": config.default_format,
        **config.scanner.model_dump(),
        "resource_types": [t.resource_type_id for t in config.resource_types],
    }
    output(data, fmt, title="Configuration")


@app.command("add-path")
@error_handler
def add_path(
    path: Annotated[str, typer.Argument(help="Project directory or a folder of projects")],
) -> None:
    """Add a project path to the configuration."""
    mgr = _get_manager()
    absolute = os.path.abspath(path)
    if mgr.add_project_path(absolute):
        console.print(f"[green]Added project path {absolute}.[/]")
    else:
        console.print(f"[yellow]{absolute} is already configured.[/]")


@app.command("remove-path")
@error_handler
def remove_path(
    path: Annotated[str, typer.Argument(help="Configured project path")],
) -> None:
    """Remove a project path from the configuration."""
    mgr = _get_manager()
    if mgr.remove_project_path(path) or mgr.remove_project_path(os.path.abspath(path)):
        console.print(f"[green]Removed project path {path}.[/]")
        return
    console.print(f"[red]Project path '{path}' is not configured.[/]")
    raise typer.Exit(1)


@app.command("set")
@error_handler
def set_value(
    key: Annotated[str, typer.Argument(help="Scanner setting name")],
    value: Annotated[str, typer.Argument(help="New value")],
) -> None:
    """Change a scanner setting, e.g. ``cache_ttl_seconds 60``."""
    key = key.replace("-", "_")
    if key not in ScannerSettings.model_fields:
        allowed = ", ".join(ScannerSettings.model_fields)
        console.print(f"[red]Unknown setting '{key}'. Choose one of: {allowed}.[/]")
        raise typer.Exit(1)
    mgr = _get_manager()
    settings = mgr.update_scanner(**{key: value})
    console.print(f"[green]{key} = {getattr(settings, key)}[/]")

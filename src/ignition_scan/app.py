"""Root Typer app — global options and command group registration."""

from __future__ import annotations

from typing import Optional

import typer

from ignition_scan import __version__
from ignition_scan.commands import config_cmd, project, types_cmd
from ignition_scan.utils.log import setup_logging

app = typer.Typer(
    name="ignition-scan",
    help="Scan Ignition SCADA project directories on disk.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"ignition-scan {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """Ignition project scanner — resources, inheritance and change tracking."""
    setup_logging(verbose)


# Register command groups
app.add_typer(project.app, name="project")
app.add_typer(types_cmd.app, name="types")
app.add_typer(config_cmd.app, name="config")


def main() -> None:
    app()

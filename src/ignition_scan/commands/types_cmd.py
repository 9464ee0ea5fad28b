"""Resource type commands."""

from __future__ import annotations

import typer

from ignition_scan.commands._common import FormatOpt, build_registry, resolve_format
from ignition_scan.config.manager import ConfigManager
from ignition_scan.output.formatter import output
from ignition_scan.scanner.errors import error_handler

app = typer.Typer(name="types", help="Inspect registered resource types.")


def _get_manager() -> ConfigManager:
    return ConfigManager()


@app.command("list")
@error_handler
def list_types(fmt: FormatOpt = None) -> None:
    """List built-in and configured resource types."""
    mgr = _get_manager()
    fmt = resolve_format(fmt, mgr)
    descriptors = build_registry(mgr.config).list()
    columns = [
        "ID", "Name", "Directories", "Singleton", "Category",
        "Searchable", "Primary File", "Icon",
    ]
    rows = [
        [
            d.resource_type_id,
            d.label,
            d.directory_paths,
            "yes" if d.is_singleton else "",
            d.category or "",
            d.searchable_extensions if d.supports_content_search else "",
            d.primary_file or "",
            d.category_icon or "",
        ]
        for d in descriptors
    ]
    output(descriptors, fmt, columns=columns, rows=rows, title="Resource Types")

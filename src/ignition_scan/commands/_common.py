"""Shared helpers for CLI commands — service factory, options, row builders."""

from __future__ import annotations

from typing import Annotated

import typer

from ignition_scan.config.manager import ConfigManager
from ignition_scan.config.models import ScanConfig
from ignition_scan.models.project import ProjectScanResult
from ignition_scan.scanner.registry import ResourceTypeRegistry
from ignition_scan.scanner.service import ProjectScannerService

# Shared Typer option type aliases
FormatOpt = Annotated[
    str | None,
    typer.Option("--format", "-f", help="Output format (table, json, yaml, csv)"),
]
NoCacheOpt = Annotated[
    bool,
    typer.Option("--no-cache", help="Ignore cached results and rescan from disk"),
]

SUMMARY_COLUMNS = ["Name", "Path", "Resources", "Inherited", "Parent Chain", "Warnings"]


def resolve_format(fmt: str | None, mgr: ConfigManager) -> str:
    """Explicit ``--format`` wins over the configured default."""
    return fmt or mgr.config.default_format


def build_registry(config: ScanConfig) -> ResourceTypeRegistry:
    """Built-in resource types plus any declared in the config file."""
    registry = ResourceTypeRegistry.with_builtins()
    for descriptor in config.resource_types:
        registry.register(descriptor)
    return registry


def make_service(mgr: ConfigManager, *, watch: bool = False) -> ProjectScannerService:
    """Create a scanner service from the config file.

    One-shot commands run without file watchers; ``project watch`` turns
    them on.
    """
    config = mgr.config
    settings = config.scanner.model_copy(update={"watch": watch})
    return ProjectScannerService(build_registry(config), settings)


def summary_row(result: ProjectScanResult) -> list[str]:
    return [
        result.project_name,
        result.project_path,
        str(result.resource_count),
        str(len(result.inherited_resources)),
        " -> ".join(result.inheritance_chain),
        str(len(result.warnings)),
    ]

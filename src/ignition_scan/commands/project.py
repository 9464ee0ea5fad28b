"""Project commands.

scan, resources, chain, check, watch.
"""

from __future__ import annotations

import asyncio
import os
from typing import Annotated, Optional

import typer
from rich.console import Console

from ignition_scan.commands._common import (
    SUMMARY_COLUMNS,
    FormatOpt,
    NoCacheOpt,
    make_service,
    resolve_format,
    summary_row,
)
from ignition_scan.config.manager import ConfigManager
from ignition_scan.models.project import CacheStats, ProjectScanResult
from ignition_scan.output.formatter import output
from ignition_scan.output.tables import resource_tree
from ignition_scan.scanner.errors import error_handler
from ignition_scan.scanner.metadata import is_ignition_project, load_project_metadata
from ignition_scan.scanner.service import ProjectScannerService

app = typer.Typer(name="project", help="Scan local Ignition project directories.")
console = Console()

PathArg = Annotated[str, typer.Argument(help="Project directory")]
PathsArg = Annotated[
    Optional[list[str]],
    typer.Argument(help="Project directories (defaults to the configured paths)"),
]


def _get_manager() -> ConfigManager:
    return ConfigManager()


def _project_paths(mgr: ConfigManager, paths: list[str] | None) -> list[str]:
    if paths:
        return [os.path.abspath(p) for p in paths]
    return mgr.resolve_project_paths()


def _print_summary(results: list[ProjectScanResult], fmt: str) -> None:
    output(
        results,
        fmt,
        columns=SUMMARY_COLUMNS,
        rows=[summary_row(r) for r in results],
        title="Projects",
    )


async def _scan_many(
    mgr: ConfigManager, project_paths: list[str], use_cache: bool,
) -> tuple[list[ProjectScanResult], CacheStats]:
    async with make_service(mgr) as service:
        results = await service.scan_projects(project_paths, use_cache=use_cache)
        return results, service.get_cache_stats()


async def _scan_one(mgr: ConfigManager, project_path: str) -> ProjectScanResult:
    async with make_service(mgr) as service:
        return await service.scan_project(project_path)


@app.command()
@error_handler
def scan(
    paths: PathsArg = None,
    no_cache: NoCacheOpt = False,
    stats: Annotated[bool, typer.Option("--stats", help="Show cache statistics")] = False,
    fmt: FormatOpt = None,
) -> None:
    """Scan projects and summarize their resources and inheritance."""
    mgr = _get_manager()
    fmt = resolve_format(fmt, mgr)
    project_paths = _project_paths(mgr, paths)
    if not project_paths:
        console.print(
            "[yellow]No project paths given. Pass directories or run "
            "'ignition-scan config add-path PATH'.[/]"
        )
        raise typer.Exit(1)

    results, cache_stats = asyncio.run(_scan_many(mgr, project_paths, not no_cache))

    if fmt == "table":
        if not results:
            console.print("[yellow]No Ignition projects found.[/]")
        else:
            _print_summary(results, fmt)
        if stats:
            output(cache_stats, fmt, title="Cache")
        return

    if stats and fmt != "csv":
        output({"projects": results, "cache": cache_stats}, fmt)
    else:
        _print_summary(results, fmt)


@app.command()
@error_handler
def resources(
    path: PathArg,
    inherited: Annotated[
        bool, typer.Option("--inherited", help="Include resources inherited from parents"),
    ] = False,
    resource_type: Annotated[
        Optional[str], typer.Option("--type", "-t", help="Only this resource type id"),
    ] = None,
    tree: Annotated[bool, typer.Option("--tree", help="Show folders as a tree")] = False,
    fmt: FormatOpt = None,
) -> None:
    """List the resources of one project."""
    mgr = _get_manager()
    fmt = resolve_format(fmt, mgr)
    result = asyncio.run(_scan_one(mgr, path))

    items = list(result.resources)
    if inherited:
        items.extend(result.inherited_resources)
    if resource_type:
        items = [r for r in items if r.type == resource_type]

    if tree and fmt == "table":
        console.print(resource_tree(result.project_name, items))
        return

    columns = ["Type", "Path", "Kind", "Origin", "Source"]
    rows = [
        [
            r.type,
            r.path,
            "folder" if r.is_folder else "resource",
            r.origin.value,
            r.source_project or "",
        ]
        for r in items
    ]
    output(items, fmt, columns=columns, rows=rows, title=f"Resources: {result.project_name}")


@app.command()
@error_handler
def chain(
    path: PathArg,
    fmt: FormatOpt = None,
) -> None:
    """Show the inheritance chain of a project, nearest parent first."""
    mgr = _get_manager()
    fmt = resolve_format(fmt, mgr)
    result = asyncio.run(_scan_one(mgr, path))

    if fmt == "table":
        console.print(" -> ".join([result.project_name, *result.inheritance_chain]))
        for warning in result.warnings:
            console.print(f"[yellow]{warning}[/]")
        return
    output(
        {
            "project": result.project_name,
            "inheritance_chain": result.inheritance_chain,
            "warnings": result.warnings,
        },
        fmt,
    )


@app.command()
@error_handler
def check(path: PathArg) -> None:
    """Check whether a directory is an Ignition project."""
    if not asyncio.run(is_ignition_project(path)):
        console.print(f"[red]Not an Ignition project (no project.json): {path}[/]")
        raise typer.Exit(1)
    metadata = asyncio.run(load_project_metadata(path))
    label = metadata.title or metadata.name or os.path.basename(os.path.abspath(path))
    console.print(f"[green]Ignition project {label}:[/] {path}")
    if metadata.parent:
        console.print(f"Parent: {metadata.parent}")


async def rescan_invalidated(
    service: ProjectScannerService, project_paths: list[str],
) -> list[ProjectScanResult]:
    """Rescan every watched project whose cache entry was invalidated."""
    rescanned: list[ProjectScanResult] = []
    for project_path in project_paths:
        if project_path not in service.cache:
            rescanned.append(await service.scan_project(project_path))
    return rescanned


async def _watch(
    mgr: ConfigManager, project_paths: list[str], fmt: str, interval: float,
) -> None:
    async with make_service(mgr, watch=True) as service:
        results = await service.scan_projects(project_paths)
        _print_summary(results, fmt)
        watched = service.watched_paths
        if not watched:
            console.print("[yellow]Nothing to watch.[/]")
            return
        console.print(f"[bold]Watching {len(watched)} project(s) for changes...[/]")
        console.print("[dim]Press Ctrl+C to stop.[/]")
        while True:
            await asyncio.sleep(interval)
            for result in await rescan_invalidated(service, watched):
                console.print(f"[cyan]Changed:[/] {result.project_name}")
                _print_summary([result], fmt)


@app.command()
@error_handler
def watch(
    paths: PathsArg = None,
    interval: Annotated[
        float, typer.Option("--interval", help="Seconds between change checks"),
    ] = 0.5,
    fmt: FormatOpt = None,
) -> None:
    """Scan projects, then rescan them whenever their files change."""
    mgr = _get_manager()
    fmt = resolve_format(fmt, mgr)
    project_paths = _project_paths(mgr, paths)
    if not project_paths:
        console.print("[yellow]No project paths given.[/]")
        raise typer.Exit(1)
    try:
        asyncio.run(_watch(mgr, project_paths, fmt, interval))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped watching.[/]")

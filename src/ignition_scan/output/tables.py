"""Rich table and tree rendering helpers."""

from __future__ import annotations

from typing import Any, Sequence

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ignition_scan.models.resource import ProjectResource


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def make_table(
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    show_lines: bool = False,
) -> Table:
    """Build a Rich Table from column headers and row data."""
    table = Table(title=title, show_lines=show_lines)
    for col in columns:
        table.add_column(col, no_wrap=False)
    for row in rows:
        table.add_row(*(_cell(cell) for cell in row))
    return table


def kv_table(data: dict[str, Any], *, title: str | None = None) -> Table:
    """Render a key-value dict as a two-column table."""
    table = Table(title=title, show_header=False, show_lines=False)
    table.add_column("Key", style="bold cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, _cell(value))
    return table


def _tree_label(resource: ProjectResource) -> str:
    label = escape(resource.metadata.name)
    if resource.is_folder:
        label = f"[bold]{label}/[/]"
    if resource.source_project:
        label += f" [dim](from {escape(resource.source_project)})[/]"
    return label


def resource_tree(title: str, resources: Sequence[ProjectResource]) -> Tree:
    """Render resources grouped by type, nested under their folders.

    Expects parents to precede their children, which is the order the
    directory scanner produces.
    """
    tree = Tree(f"[bold]{escape(title)}[/]")
    by_type: dict[str, Tree] = {}
    nodes: dict[tuple[str, str, str], Tree] = {}
    for resource in resources:
        branch = by_type.get(resource.type)
        if branch is None:
            branch = by_type[resource.type] = tree.add(f"[cyan]{escape(resource.type)}[/]")
        source = resource.source_project or ""
        parent_path = resource.path.rsplit("/", 1)[0]
        parent = nodes.get((resource.type, source, parent_path), branch)
        nodes[(resource.type, source, resource.path)] = parent.add(_tree_label(resource))
    return tree

"""Inheritance resolver — parent chains, inherited resources, parent discovery.

Projects name their parent in ``project.json``. The parent is looked up
among known scan results by directory name (the identity Ignition uses),
falling back to the project's display name. Missing parents are searched
for on disk next to the known projects and scanned on demand.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ignition_scan.models.project import ProjectMetadata, ProjectScanResult
from ignition_scan.models.resource import ProjectResource
from ignition_scan.scanner.errors import IgnitionScanError
from ignition_scan.scanner.metadata import is_ignition_project, load_project_metadata

logger = logging.getLogger(__name__)

ProjectMap = dict[str, ProjectScanResult]
ScanFunc = Callable[[str], Awaitable[ProjectScanResult | None]]

CYCLE_WARNING = "Circular inheritance detected"
MISSING_PARENT_WARNING = "Parent project"


@dataclass
class ChainResolution:
    """Ancestor names, nearest first, plus why the chain stopped early."""

    chain: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class ParentCollection:
    """Parent names followed during discovery and the projects scanned for them."""

    names: list[str] = field(default_factory=list)
    discovered: list[ProjectScanResult] = field(default_factory=list)


def is_inheritance_warning(warning: str) -> bool:
    return warning.startswith((CYCLE_WARNING, MISSING_PARENT_WARNING))


def _parent_of(metadata: ProjectMetadata) -> str | None:
    parent = (metadata.parent or "").strip()
    return parent or None


def add_to_project_map(project_map: ProjectMap, result: ProjectScanResult) -> None:
    """Index *result* by project name, then by directory name.

    The directory name is written last so it wins when a title collides
    with another project's directory.
    """
    project_map.setdefault(result.project_name, result)
    project_map[result.directory_name] = result


def build_project_map(results: Iterable[ProjectScanResult]) -> ProjectMap:
    project_map: ProjectMap = {}
    results = list(results)
    for result in results:
        project_map[result.project_name] = result
    for result in results:
        project_map[result.directory_name] = result
    return project_map


def _list_subdirectories(path: Path) -> list[Path]:
    return sorted(p for p in path.iterdir() if p.is_dir())


class InheritanceResolver:
    """Resolves parent chains and flattens inherited resources."""

    def resolve_chain(
        self,
        project_name: str,
        metadata: ProjectMetadata,
        known: ProjectMap,
        *,
        directory_name: str | None = None,
    ) -> ChainResolution:
        """Follow ``parent`` links through *known*, nearest ancestor first.

        Stops at the first ancestor that is unknown or already visited; the
        chain built so far is returned along with a warning.
        """
        resolution = ChainResolution()
        visited = {project_name}
        if directory_name:
            visited.add(directory_name)
        path_taken = [directory_name or project_name]
        owner = project_name
        parent_name = _parent_of(metadata)

        while parent_name:
            if parent_name in visited:
                message = (
                    f"{CYCLE_WARNING}: "
                    f"{' -> '.join(path_taken)} -> {parent_name}"
                )
                logger.warning("%s", message)
                resolution.warnings.append(message)
                break
            parent = known.get(parent_name)
            if parent is None:
                message = (
                    f"{MISSING_PARENT_WARNING} '{parent_name}' "
                    f"not found for project '{owner}'"
                )
                logger.warning("%s", message)
                resolution.warnings.append(message)
                break
            resolution.chain.append(parent_name)
            path_taken.append(parent_name)
            visited.update((parent_name, parent.project_name, parent.directory_name))
            owner = parent.project_name
            parent_name = _parent_of(parent.metadata)

        return resolution

    def resolve_inherited_resources(
        self, chain: Iterable[str], known: ProjectMap,
    ) -> list[ProjectResource]:
        """Local resources of every ancestor, nearest ancestor first."""
        inherited: list[ProjectResource] = []
        for ancestor_name in chain:
            ancestor = known.get(ancestor_name)
            if ancestor is None:
                continue
            inherited.extend(r.as_inherited(ancestor_name) for r in ancestor.resources)
        return inherited

    async def discover_parent_paths(
        self, parent_names: Iterable[str], search_roots: Iterable[str],
    ) -> list[str]:
        """Locate project directories for *parent_names* near *search_roots*.

        The parent and grandparent directories of every root are searched,
        first for a directly named sibling, then for any subdirectory whose
        ``project.json`` title or directory name matches.
        """
        search_dirs: list[Path] = []
        for root in search_roots:
            parent_dir = Path(root).parent
            for candidate in (parent_dir, parent_dir.parent):
                if candidate not in search_dirs:
                    search_dirs.append(candidate)

        discovered: list[str] = []
        for name in parent_names:
            found: str | None = None
            for search_dir in search_dirs:
                found = await self._search_directory(search_dir, name)
                if found:
                    break
            if found:
                logger.debug("Discovered parent project '%s' at %s", name, found)
                discovered.append(found)
            else:
                logger.warning("Could not find parent project: %s", name)
        return discovered

    async def _search_directory(self, search_dir: Path, name: str) -> str | None:
        candidate = search_dir / name
        if await is_ignition_project(candidate):
            return os.path.abspath(candidate)

        try:
            subdirs = await asyncio.to_thread(_list_subdirectories, search_dir)
        except OSError as exc:
            logger.debug("Cannot list %s: %s", search_dir, exc)
            return None
        for subdir in subdirs:
            if not await is_ignition_project(subdir):
                continue
            metadata = await load_project_metadata(subdir)
            if metadata.title == name or subdir.name == name:
                return os.path.abspath(subdir)
        return None

    async def collect_parents(
        self,
        metadata: ProjectMetadata,
        known: ProjectMap,
        search_roots: Iterable[str],
        scan: ScanFunc,
    ) -> ParentCollection:
        """Walk the parent links, scanning ancestors missing from *known*.

        Newly scanned ancestors are added to *known*, so a later
        ``resolve_chain`` against the same map sees them.
        """
        collection = ParentCollection()
        search_roots = list(search_roots)
        parent_name = _parent_of(metadata)

        while parent_name and parent_name not in collection.names:
            collection.names.append(parent_name)
            parent = known.get(parent_name)
            if parent is None:
                try:
                    paths = await self.discover_parent_paths([parent_name], search_roots)
                    parent = await scan(paths[0]) if paths else None
                except (IgnitionScanError, OSError) as exc:
                    logger.warning(
                        "Failed to collect parent projects for %s: %s", parent_name, exc,
                    )
                    break
                if parent is None:
                    break
                add_to_project_map(known, parent)
                collection.discovered.append(parent)
            parent_name = _parent_of(parent.metadata)

        return collection

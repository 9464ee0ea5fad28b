"""Directory scanner — discovers resources of one type inside a project.

Multi-instance types are walked recursively. A directory containing
``resource.json`` is a resource instance; a directory holding only
subdirectories (or nothing) is an organizational folder; a directory with
loose files but no ``resource.json`` is not a resource. Every directory is
recursed into regardless, since resources may nest. Symbolic links to
directories are not followed.

Singleton types are a single directory: it is the resource if it holds
``resource.json``, or failing that if it is non-empty.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from ignition_scan.models.resource import (
    ProjectResource,
    ResourceFile,
    ResourceMetadata,
    ResourceOrigin,
    ResourceTypeDescriptor,
)
from ignition_scan.scanner.metadata import RESOURCE_FILE

logger = logging.getLogger(__name__)

ROOT_CATEGORY = "root"


@dataclass(frozen=True)
class DirEntry:
    name: str
    is_dir: bool


@dataclass
class ScanOutcome:
    """Resources found plus non-fatal problems met on the way."""

    resources: list[ProjectResource] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def extend(self, other: ScanOutcome) -> None:
        self.resources.extend(other.resources)
        self.warnings.extend(other.warnings)


def _list_dir(path: Path) -> list[DirEntry]:
    with os.scandir(path) as it:
        entries = [DirEntry(e.name, e.is_dir(follow_symlinks=False)) for e in it]
    return sorted(entries, key=lambda e: e.name)


def _mtime_ms(path: Path) -> int:
    return int(path.stat().st_mtime * 1000)


def _list_files(path: Path) -> list[ResourceFile]:
    files: list[ResourceFile] = []
    for entry in _list_dir(path):
        if entry.is_dir:
            continue
        file_path = path / entry.name
        try:
            size = file_path.stat().st_size
        except OSError:
            continue
        files.append(ResourceFile(name=entry.name, path=str(file_path), size=size))
    return files


@dataclass(frozen=True)
class _TypeContext:
    descriptor: ResourceTypeDescriptor
    project_path: str

    @property
    def category(self) -> str:
        return self.descriptor.category or ROOT_CATEGORY


class DirectoryScanner:
    """Produces ``ProjectResource`` entries for one resource type at a time."""

    def __init__(self) -> None:
        self.walk_count = 0

    async def scan(
        self, project_path: str | Path, descriptor: ResourceTypeDescriptor,
    ) -> ScanOutcome:
        """Scan every directory path *descriptor* declares under *project_path*."""
        self.walk_count += 1
        ctx = _TypeContext(descriptor, str(project_path))
        outcome = ScanOutcome()
        for relative in descriptor.directory_paths:
            relative = relative.strip("/")
            dir_path = Path(project_path, *relative.split("/"))
            if not await asyncio.to_thread(dir_path.is_dir):
                continue
            if descriptor.is_singleton:
                outcome.extend(await self._scan_singleton(ctx, dir_path, relative))
            else:
                outcome.extend(await self._scan_multi(ctx, dir_path, relative))
        logger.debug(
            "Found %d %s resources in %s",
            len(outcome.resources), descriptor.resource_type_id, project_path,
        )
        return outcome

    async def _scan_singleton(
        self, ctx: _TypeContext, dir_path: Path, relative: str,
    ) -> ScanOutcome:
        outcome = ScanOutcome()
        try:
            entries = await asyncio.to_thread(_list_dir, dir_path)
            has_resource_json = any(
                e.name == RESOURCE_FILE and not e.is_dir for e in entries
            )
            # Non-empty directory without resource.json still counts.
            if not has_resource_json and not entries:
                return outcome
            files = await asyncio.to_thread(_list_files, dir_path)
            resource = await self._make_resource(
                ctx, dir_path, relative, is_folder=False, files=files,
            )
        except OSError as exc:
            logger.warning("Failed to scan singleton directory %s: %s", dir_path, exc)
            outcome.warnings.append(f"Could not read {relative}: {exc}")
            return outcome
        outcome.resources.append(resource)
        return outcome

    async def _scan_multi(
        self, ctx: _TypeContext, dir_path: Path, relative: str,
    ) -> ScanOutcome:
        outcome = ScanOutcome()
        try:
            entries = await asyncio.to_thread(_list_dir, dir_path)
        except OSError as exc:
            logger.warning("Failed to scan resource directory %s: %s", dir_path, exc)
            outcome.warnings.append(f"Could not read {relative}: {exc}")
            return outcome
        await self._walk(ctx, dir_path, relative, entries, outcome)
        return outcome

    async def _walk(
        self,
        ctx: _TypeContext,
        dir_path: Path,
        relative: str,
        entries: list[DirEntry],
        outcome: ScanOutcome,
    ) -> None:
        for entry in entries:
            if not entry.is_dir:
                continue
            child_path = dir_path / entry.name
            child_relative = f"{relative}/{entry.name}"
            try:
                children = await asyncio.to_thread(_list_dir, child_path)
                has_resource_json = any(
                    c.name == RESOURCE_FILE and not c.is_dir for c in children
                )
                has_files = any(not c.is_dir for c in children)
                resource = None
                if has_resource_json:
                    resource = await self._make_resource(
                        ctx, child_path, child_relative, is_folder=False,
                    )
                elif not has_files:
                    resource = await self._make_resource(
                        ctx, child_path, child_relative, is_folder=True,
                    )
            except OSError as exc:
                logger.warning("Skipping %s: %s", child_path, exc)
                outcome.warnings.append(f"Could not read {child_relative}: {exc}")
                continue
            if resource is not None:
                outcome.resources.append(resource)
            await self._walk(ctx, child_path, child_relative, children, outcome)

    async def _make_resource(
        self,
        ctx: _TypeContext,
        dir_path: Path,
        relative: str,
        *,
        is_folder: bool,
        files: list[ResourceFile] | None = None,
    ) -> ProjectResource:
        descriptor = ctx.descriptor
        last_modified = await asyncio.to_thread(_mtime_ms, dir_path)
        key = f"{descriptor.resource_type_id}:{relative}"
        return ProjectResource(
            type=descriptor.resource_type_id,
            path=relative,
            origin=ResourceOrigin.LOCAL,
            files=files or [],
            metadata=ResourceMetadata(
                is_folder=is_folder,
                key=key,
                name=relative.rsplit("/", 1)[-1],
                category=ctx.category,
                project_path=ctx.project_path,
                last_modified=last_modified,
                size=0,
                display_name=descriptor.display_name,
                singleton=descriptor.is_singleton,
            ),
        )

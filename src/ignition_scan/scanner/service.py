"""Project scanner service — scan orchestration, caching and watching.

``ProjectScannerService.scan_project`` is the entry point: it loads
``project.json``, scans every registered resource type, resolves the
inheritance chain (discovering and scanning missing parents on the way),
caches the finished result and arms a file watcher that invalidates the
cache entry when the project changes.

Concurrent scans of the same path share one in-flight task. Scans that
discover parents call back into ``scan_project``; a context variable tracks
which paths the current task is already scanning so an inheritance cycle
cannot make a scan wait on itself.
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
import os
import time
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from ignition_scan.config.models import ScannerSettings
from ignition_scan.models.project import CacheStats, ProjectScanResult
from ignition_scan.models.resource import ResourceTypeDescriptor
from ignition_scan.scanner.cache import ScanCache
from ignition_scan.scanner.directory import DirectoryScanner, ScanOutcome
from ignition_scan.scanner.errors import (
    ProjectPathNotFoundError,
    ServiceStateError,
)
from ignition_scan.scanner.inheritance import (
    InheritanceResolver,
    ProjectMap,
    add_to_project_map,
    build_project_map,
    is_inheritance_warning,
)
from ignition_scan.scanner.metadata import (
    PROJECT_FILE,
    is_ignition_project,
    load_project_metadata,
)
from ignition_scan.scanner.registry import ResourceTypeRegistry
from ignition_scan.utils.file_watcher import ProjectWatcher

logger = logging.getLogger(__name__)

ScanListener = Callable[[ProjectScanResult], None]
WatcherFactory = Callable[[str, Callable[[], None], float], Any]

# Paths being scanned by the current task and the tasks that spawned it.
_scan_stack: contextvars.ContextVar[tuple[str, ...]] = contextvars.ContextVar(
    "scan_stack", default=(),
)


class ServiceStatus(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


def normalize_path(path: str | Path) -> str:
    return os.path.abspath(os.path.normpath(os.fspath(path)))


class ProjectScannerService:
    """Scans Ignition project directories and keeps the results cached."""

    def __init__(
        self,
        registry: ResourceTypeRegistry | None = None,
        settings: ScannerSettings | None = None,
        *,
        scanner: DirectoryScanner | None = None,
        resolver: InheritanceResolver | None = None,
        cache: ScanCache | None = None,
        watcher_factory: WatcherFactory = ProjectWatcher,
    ) -> None:
        self.registry = registry if registry is not None else ResourceTypeRegistry.with_builtins()
        self.settings = settings or ScannerSettings()
        self.scanner = scanner or DirectoryScanner()
        self.resolver = resolver or InheritanceResolver()
        if cache is None:
            cache = ScanCache(ttl=self.settings.cache_ttl_seconds)
        self.cache = cache
        self._watcher_factory = watcher_factory
        self._watchers: dict[str, Any] = {}
        self._in_flight: dict[str, asyncio.Task[ProjectScanResult]] = {}
        # scanning path -> path whose in-flight scan it is waiting on
        self._waiting_on: dict[str, str] = {}
        self._listeners: list[ScanListener] = []
        self._initialized = False

    # -- lifecycle ---------------------------------------------------------

    async def initialize(self) -> None:
        self._initialized = True

    async def start(self) -> None:
        if not self._initialized:
            raise ServiceStateError(
                "ProjectScannerService must be initialized before starting"
            )

    async def stop(self) -> None:
        watchers = list(self._watchers.values())
        self._watchers.clear()
        for watcher in watchers:
            await watcher.stop()
        self.cache.clear()
        self._in_flight.clear()
        self._waiting_on.clear()

    async def dispose(self) -> None:
        await self.stop()
        self._listeners.clear()
        self._initialized = False

    @property
    def status(self) -> ServiceStatus:
        return ServiceStatus.RUNNING if self._initialized else ServiceStatus.STOPPED

    async def __aenter__(self) -> ProjectScannerService:
        await self.initialize()
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.dispose()

    # -- events ------------------------------------------------------------

    def on_scan_complete(self, listener: ScanListener) -> Callable[[], None]:
        """Subscribe to completed (non-cached) scans; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit_scan_complete(self, result: ProjectScanResult) -> None:
        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception:
                logger.exception("Scan listener failed for %s", result.project_path)

    # -- scanning ----------------------------------------------------------

    async def scan_project(
        self, project_path: str | Path, use_cache: bool = True,
    ) -> ProjectScanResult:
        """Scan one project directory.

        Raises ProjectPathNotFoundError if the path is not a directory.
        """
        key = normalize_path(project_path)

        in_flight = self._in_flight.get(key)
        if in_flight is not None:
            return await asyncio.shield(in_flight)

        if use_cache:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        task = asyncio.get_running_loop().create_task(
            self._run_scan(key), name=f"scan:{key}",
        )
        self._in_flight[key] = task
        return await asyncio.shield(task)

    async def _run_scan(self, key: str) -> ProjectScanResult:
        _scan_stack.set((*_scan_stack.get(), key))
        try:
            return await self._execute_scan(key)
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

    async def _execute_scan(self, key: str) -> ProjectScanResult:
        started = time.perf_counter()
        await self._verify_project_path(key)

        metadata = await load_project_metadata(key)
        project_name = metadata.title or metadata.name or os.path.basename(key)

        outcome = await self._scan_resources(key)
        scan_time = round((time.perf_counter() - started) * 1000, 3)
        warnings = outcome.warnings + await self._validate_structure(key, outcome)

        result = ProjectScanResult(
            project_path=key,
            project_name=project_name,
            metadata=metadata,
            resources=outcome.resources,
            scan_time=scan_time,
            resource_count=len(outcome.resources),
            warnings=warnings,
            last_scanned=datetime.now(timezone.utc).isoformat(),
        )

        # The chain must be complete before the result becomes visible in the cache.
        result, ancestors = await self._resolve_inheritance(result, [key])

        self.cache.put(key, result)
        self._refresh_ancestors(ancestors)
        self._arm_watcher(key)
        logger.debug(
            "Scanned %s: %d resources, %d inherited in %.1f ms",
            project_name, result.resource_count,
            len(result.inherited_resources), scan_time,
        )
        self._emit_scan_complete(result)
        return result

    async def scan_projects(
        self, project_paths: Iterable[str | Path], use_cache: bool = True,
    ) -> list[ProjectScanResult]:
        """Scan many projects with bounded concurrency.

        Failures are logged and skipped. Results are returned with
        inheritance resolved across the whole set, including parents found
        on disk, and without directories that lack ``project.json`` data.
        """
        paths = [normalize_path(p) for p in project_paths]
        concurrency = self.settings.batch_concurrency
        results: list[ProjectScanResult] = []
        errors: list[str] = []

        for start in range(0, len(paths), concurrency):
            batch = paths[start:start + concurrency]
            batch_results = await asyncio.gather(
                *(self._scan_collecting_errors(p, use_cache, errors) for p in batch)
            )
            results.extend(r for r in batch_results if r is not None)

        if errors:
            logger.warning(
                "Project scanning completed with %d errors: %s",
                len(errors), "; ".join(errors),
            )

        results = await self._build_inheritance_chains(results, paths)
        return [r for r in results if r.metadata.has_identity]

    async def _scan_collecting_errors(
        self, project_path: str, use_cache: bool, errors: list[str],
    ) -> ProjectScanResult | None:
        try:
            return await self.scan_project(project_path, use_cache)
        except Exception as exc:
            errors.append(f"Failed to scan {project_path}: {exc}")
            logger.error("Project scan failed for %s: %s", project_path, exc)
            return None

    async def _verify_project_path(self, project_path: str) -> None:
        path = Path(project_path)
        try:
            is_dir = await asyncio.to_thread(path.is_dir)
            exists = is_dir or await asyncio.to_thread(path.exists)
        except OSError as exc:
            raise ProjectPathNotFoundError(project_path, "Path is not accessible") from exc
        if not exists:
            raise ProjectPathNotFoundError(project_path, "Path is not accessible")
        if not is_dir:
            raise ProjectPathNotFoundError(project_path, "Path exists but is not a directory")

    async def _scan_resources(self, project_path: str) -> ScanOutcome:
        descriptors = self.registry.list()
        outcomes = await asyncio.gather(
            *(self._scan_type(project_path, d) for d in descriptors)
        )
        combined = ScanOutcome()
        for outcome in outcomes:
            combined.extend(outcome)
        return combined

    async def _scan_type(
        self, project_path: str, descriptor: ResourceTypeDescriptor,
    ) -> ScanOutcome:
        try:
            return await self.scanner.scan(project_path, descriptor)
        except OSError as exc:
            logger.warning(
                "Error scanning %s resources in %s: %s",
                descriptor.resource_type_id, project_path, exc,
            )
            return ScanOutcome(
                warnings=[f"Failed to scan {descriptor.resource_type_id} resources: {exc}"],
            )

    async def _validate_structure(
        self, project_path: str, outcome: ScanOutcome,
    ) -> list[str]:
        warnings: list[str] = []
        if not outcome.resources:
            warnings.append("No resources found in project directory")
        if not await is_ignition_project(project_path):
            warnings.append(f"No {PROJECT_FILE} file found")
        return warnings

    # -- inheritance -------------------------------------------------------

    def _known_projects(self, *extra: ProjectScanResult) -> ProjectMap:
        return build_project_map([*self.cache.results(), *extra])

    async def _resolve_inheritance(
        self, result: ProjectScanResult, search_roots: list[str],
    ) -> tuple[ProjectScanResult, list[ProjectScanResult]]:
        if not (result.metadata.parent or "").strip():
            return result, []
        known = self._known_projects(result)
        collection = await self.resolver.collect_parents(
            result.metadata, known, search_roots, self._scan_ancestor,
        )
        return self._with_inheritance(result, known), collection.discovered

    def _refresh_ancestors(self, ancestors: list[ProjectScanResult]) -> None:
        """Re-resolve parents that were cached before this project was.

        In a cycle the parent scan could not see the project that started
        it, so its chain stopped short with a missing-parent warning.
        """
        if not ancestors:
            return
        known = self._known_projects()
        cached = {r.project_path: r for r in self.cache.results()}
        for ancestor in ancestors:
            current = cached.get(ancestor.project_path)
            if current is None:
                continue
            updated = self._with_inheritance(current, known)
            if updated != current:
                self.cache.replace(current.project_path, updated)

    def _with_inheritance(
        self, result: ProjectScanResult, known: ProjectMap,
    ) -> ProjectScanResult:
        resolution = self.resolver.resolve_chain(
            result.project_name, result.metadata, known,
            directory_name=result.directory_name,
        )
        inherited = self.resolver.resolve_inherited_resources(resolution.chain, known)
        warnings = [w for w in result.warnings if not is_inheritance_warning(w)]
        return result.model_copy(
            update={
                "inheritance_chain": resolution.chain,
                "inherited_resources": inherited,
                "warnings": warnings + resolution.warnings,
            },
        )

    async def _scan_ancestor(self, project_path: str) -> ProjectScanResult | None:
        """Scan a discovered parent unless that would wait on our own scan."""
        key = normalize_path(project_path)
        stack = _scan_stack.get()
        if self._would_deadlock(key, stack):
            logger.warning("Circular inheritance: %s is already being scanned", key)
            return None
        owner = stack[-1] if stack else None
        if owner is not None:
            self._waiting_on[owner] = key
        try:
            return await self.scan_project(key, use_cache=True)
        finally:
            if owner is not None:
                self._waiting_on.pop(owner, None)

    def _would_deadlock(self, key: str, stack: tuple[str, ...]) -> bool:
        seen: set[str] = set()
        current: str | None = key
        while current is not None and current not in seen:
            if current in stack:
                return True
            seen.add(current)
            current = self._waiting_on.get(current)
        return False

    async def _build_inheritance_chains(
        self, results: list[ProjectScanResult], search_roots: list[str],
    ) -> list[ProjectScanResult]:
        known = self._known_projects(*results)
        result_paths = {r.project_path for r in results}
        results = list(results)

        for result in list(results):
            collection = await self.resolver.collect_parents(
                result.metadata, known, search_roots, self._scan_ancestor,
            )
            for name in collection.names:
                parent = known.get(name)
                if parent is not None and parent.project_path not in result_paths:
                    result_paths.add(parent.project_path)
                    results.append(parent)

        # Re-index so every project sees the latest results of the others.
        for result in results:
            add_to_project_map(known, result)

        resolved: list[ProjectScanResult] = []
        for result in results:
            updated = self._with_inheritance(result, known)
            if updated != result:
                self.cache.replace(result.project_path, updated)
            resolved.append(updated)
        return resolved

    # -- cache & watchers --------------------------------------------------

    def invalidate_cache(self, project_path: str | Path) -> None:
        key = normalize_path(project_path)
        if self.cache.invalidate(key):
            logger.debug("Cache invalidated for %s", key)

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def get_all_cached_results(self) -> list[ProjectScanResult]:
        return self.cache.results()

    def get_project(self, name_or_directory: str) -> ProjectScanResult | None:
        """Find a cached project by project name or directory name."""
        for result in self.cache.results():
            if name_or_directory in (result.project_name, result.directory_name):
                return result
        return None

    async def rescan_project(self, name_or_directory: str) -> ProjectScanResult | None:
        """Drop a cached project and scan it again from disk."""
        project = self.get_project(name_or_directory)
        if project is None:
            return None
        self.invalidate_cache(project.project_path)
        return await self.scan_project(project.project_path, use_cache=False)

    async def is_ignition_project(self, project_path: str | Path) -> bool:
        return await is_ignition_project(project_path)

    def _arm_watcher(self, key: str) -> None:
        if not self.settings.watch:
            return
        previous = self._watchers.pop(key, None)
        if previous is not None:
            previous.close()
        watcher = self._watcher_factory(
            key, lambda: self.invalidate_cache(key), self.settings.debounce_seconds,
        )
        try:
            watcher.start()
        except (OSError, RuntimeError) as exc:
            logger.warning("Failed to set up file watcher for %s: %s", key, exc)
            return
        self._watchers[key] = watcher

    @property
    def watched_paths(self) -> list[str]:
        return list(self._watchers)

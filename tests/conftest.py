"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from ignition_scan.config.manager import ConfigManager
from ignition_scan.config.models import ScannerSettings
from ignition_scan.scanner.service import ProjectScannerService

SCRIPTS = "ignition/script-python"
QUERIES = "ignition/named-query"
VIEWS = "com.inductiveautomation.perspective/views"


def write_project(
    root: Path,
    directory: str,
    *,
    title: str | None = None,
    parent: str | None = None,
    **extra,
) -> Path:
    """Create ``root/directory`` with a project.json built from the arguments."""
    project = root / directory
    project.mkdir(parents=True, exist_ok=True)
    data = dict(extra)
    if title is not None:
        data["title"] = title
    if parent is not None:
        data["parent"] = parent
    (project / "project.json").write_text(json.dumps(data), encoding="utf-8")
    return project


def write_resource(project: Path, relative: str, *files: str) -> Path:
    """Create a resource directory holding resource.json and *files*."""
    resource = project.joinpath(*relative.split("/"))
    resource.mkdir(parents=True, exist_ok=True)
    (resource / "resource.json").write_text("{}", encoding="utf-8")
    for name in files:
        (resource / name).write_text("x", encoding="utf-8")
    return resource


class FakeWatcher:
    """Stands in for ProjectWatcher; records lifecycle calls."""

    def __init__(self, project_path: str, on_change: Callable[[], None], debounce: float) -> None:
        self.project_path = project_path
        self.on_change = on_change
        self.debounce = debounce
        self.started = False
        self.closed = False
        self.stopped = False

    def start(self) -> None:
        self.started = True

    def close(self) -> None:
        self.closed = True

    async def stop(self) -> None:
        self.stopped = True


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def config_manager(tmp_config: Path) -> ConfigManager:
    """Return a ConfigManager pointed at a temp config file."""
    return ConfigManager(config_path=tmp_config)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("IGNITION_SCAN_CONFIG", raising=False)
    monkeypatch.delenv("IGNITION_SCAN_PROJECT_PATHS", raising=False)


@pytest.fixture
def projects_root(tmp_path: Path) -> Path:
    root = tmp_path / "projects"
    root.mkdir()
    return root


@pytest.fixture
def base_and_child(projects_root: Path) -> tuple[Path, Path]:
    """A parent project ``Base`` and a project ``Child`` inheriting from it."""
    base = write_project(projects_root, "Base", title="Base")
    write_resource(base, f"{SCRIPTS}/util", "code.py")
    write_resource(base, f"{VIEWS}/Shared/Header", "view.json")

    child = write_project(projects_root, "Child", title="Child", parent="Base")
    write_resource(child, f"{QUERIES}/q1", "query.sql")
    write_resource(child, f"{VIEWS}/Main", "view.json")
    return base, child


@pytest.fixture
def watchers() -> list[FakeWatcher]:
    return []


@pytest.fixture
def watcher_factory(watchers: list[FakeWatcher]) -> Callable[..., FakeWatcher]:
    def factory(project_path: str, on_change: Callable[[], None], debounce: float) -> FakeWatcher:
        watcher = FakeWatcher(project_path, on_change, debounce)
        watchers.append(watcher)
        return watcher

    return factory


@pytest.fixture
def service() -> ProjectScannerService:
    """A scanner service with the built-in types and no file watching."""
    return ProjectScannerService(settings=ScannerSettings(watch=False))


@pytest.fixture
def make_project() -> Callable[..., Path]:
    return write_project


@pytest.fixture
def make_resource() -> Callable[..., Path]:
    return write_resource

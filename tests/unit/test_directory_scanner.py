"""Tests for the directory scanner."""

from __future__ import annotations

import asyncio
from pathlib import Path

from ignition_scan.models.resource import ResourceOrigin, ResourceTypeDescriptor
from ignition_scan.scanner.directory import DirectoryScanner
from ignition_scan.scanner.registry import ResourceTypeRegistry

VIEWS = "com.inductiveautomation.perspective/views"
PAGE_CONFIG = "com.inductiveautomation.perspective/page-config"


def _builtin(type_id: str) -> ResourceTypeDescriptor:
    descriptor = ResourceTypeRegistry.with_builtins().get(type_id)
    assert descriptor is not None
    return descriptor


def _scan(project: Path, type_id: str):
    return asyncio.run(DirectoryScanner().scan(project, _builtin(type_id)))


class TestMultiInstance:
    def test_resource_dirs(self, tmp_path: Path, make_resource):
        make_resource(tmp_path, "ignition/script-python/alpha", "code.py")
        make_resource(tmp_path, "ignition/script-python/beta", "code.py")
        outcome = _scan(tmp_path, "script-python")
        assert [r.path for r in outcome.resources] == [
            "ignition/script-python/alpha",
            "ignition/script-python/beta",
        ]
        assert outcome.warnings == []

    def test_resource_fields(self, tmp_path: Path, make_resource):
        make_resource(tmp_path, f"{VIEWS}/Main", "view.json")
        (resource,) = _scan(tmp_path, "perspective-view").resources
        assert resource.type == "perspective-view"
        assert resource.origin == ResourceOrigin.LOCAL
        assert resource.source_project is None
        assert resource.key == f"perspective-view:{VIEWS}/Main"
        assert resource.metadata.name == "Main"
        assert resource.metadata.category == "Perspective"
        assert resource.metadata.project_path == str(tmp_path)
        assert resource.metadata.last_modified > 0
        assert resource.metadata.size == 0
        assert resource.is_folder is False

    def test_uncategorized_type_uses_root(self, tmp_path: Path, make_resource):
        make_resource(tmp_path, "ignition/named-query/q")
        (resource,) = _scan(tmp_path, "named-query").resources
        assert resource.metadata.category == "root"

    def test_organizational_folder(self, tmp_path: Path, make_resource):
        make_resource(tmp_path, f"{VIEWS}/Org/Sub")
        resources = _scan(tmp_path, "perspective-view").resources
        by_path = {r.path: r for r in resources}
        assert by_path[f"{VIEWS}/Org"].is_folder is True
        assert by_path[f"{VIEWS}/Org/Sub"].is_folder is False

    def test_empty_directory_is_folder(self, tmp_path: Path):
        (tmp_path / "ignition" / "script-python" / "empty").mkdir(parents=True)
        (resource,) = _scan(tmp_path, "script-python").resources
        assert resource.path == "ignition/script-python/empty"
        assert resource.is_folder is True

    def test_loose_files_without_resource_json_skipped(self, tmp_path: Path, make_resource):
        loose = tmp_path / "ignition" / "script-python" / "loose"
        loose.mkdir(parents=True)
        (loose / "notes.txt").write_text("hi")
        make_resource(tmp_path, "ignition/script-python/loose/inner")
        paths = [r.path for r in _scan(tmp_path, "script-python").resources]
        assert paths == ["ignition/script-python/loose/inner"]

    def test_nested_resources_recursed(self, tmp_path: Path, make_resource):
        make_resource(tmp_path, "ignition/script-python/outer", "code.py")
        make_resource(tmp_path, "ignition/script-python/outer/inner", "code.py")
        paths = [r.path for r in _scan(tmp_path, "script-python").resources]
        assert paths == [
            "ignition/script-python/outer",
            "ignition/script-python/outer/inner",
        ]

    def test_depth_first_sorted_order(self, tmp_path: Path, make_resource):
        make_resource(tmp_path, f"{VIEWS}/B")
        make_resource(tmp_path, f"{VIEWS}/A/Child")
        paths = [r.path for r in _scan(tmp_path, "perspective-view").resources]
        assert paths == [f"{VIEWS}/A", f"{VIEWS}/A/Child", f"{VIEWS}/B"]

    def test_files_in_type_root_ignored(self, tmp_path: Path):
        root = tmp_path / "ignition" / "script-python"
        root.mkdir(parents=True)
        (root / "stray.py").write_text("x")
        assert _scan(tmp_path, "script-python").resources == []

    def test_missing_type_directory(self, tmp_path: Path):
        outcome = _scan(tmp_path, "script-python")
        assert outcome.resources == []
        assert outcome.warnings == []

    def test_type_path_is_a_file(self, tmp_path: Path):
        (tmp_path / "ignition").mkdir()
        (tmp_path / "ignition" / "script-python").write_text("not a dir")
        assert _scan(tmp_path, "script-python").resources == []

    def test_multiple_directory_paths(self, tmp_path: Path, make_resource):
        descriptor = ResourceTypeDescriptor(
            resource_type_id="custom", directory_paths=["one", "two/"],
        )
        make_resource(tmp_path, "one/a")
        make_resource(tmp_path, "two/b")
        outcome = asyncio.run(DirectoryScanner().scan(tmp_path, descriptor))
        assert [r.path for r in outcome.resources] == ["one/a", "two/b"]

    def test_walk_count(self, tmp_path: Path):
        scanner = DirectoryScanner()
        asyncio.run(scanner.scan(tmp_path, _builtin("script-python")))
        asyncio.run(scanner.scan(tmp_path, _builtin("named-query")))
        assert scanner.walk_count == 2

    def test_symlinked_directory_not_followed(self, tmp_path: Path, make_resource):
        resource = make_resource(tmp_path, "ignition/script-python/a", "code.py")
        (resource / "loop").symlink_to(tmp_path / "ignition" / "script-python", target_is_directory=True)
        outcome = _scan(tmp_path, "script-python")
        assert [r.path for r in outcome.resources] == ["ignition/script-python/a"]
        assert outcome.warnings == []


class TestSingleton:
    def test_with_resource_json(self, tmp_path: Path, make_resource):
        make_resource(tmp_path, PAGE_CONFIG, "config.json")
        (resource,) = _scan(tmp_path, "perspective-page-config").resources
        assert resource.path == PAGE_CONFIG
        assert resource.key == f"perspective-page-config:{PAGE_CONFIG}"
        assert resource.metadata.singleton is True
        assert resource.is_folder is False
        assert sorted(f.name for f in resource.files) == ["config.json", "resource.json"]

    def test_non_empty_without_resource_json(self, tmp_path: Path):
        config_dir = tmp_path.joinpath(*PAGE_CONFIG.split("/"))
        config_dir.mkdir(parents=True)
        (config_dir / "config.json").write_text("{}")
        (resource,) = _scan(tmp_path, "perspective-page-config").resources
        assert [f.name for f in resource.files] == ["config.json"]
        assert resource.files[0].size == 2

    def test_empty_directory(self, tmp_path: Path):
        tmp_path.joinpath(*PAGE_CONFIG.split("/")).mkdir(parents=True)
        assert _scan(tmp_path, "perspective-page-config").resources == []

    def test_missing_directory(self, tmp_path: Path):
        assert _scan(tmp_path, "perspective-session-props").resources == []

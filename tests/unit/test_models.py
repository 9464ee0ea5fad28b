"""Tests for resource and project models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ignition_scan.models.project import ProjectMetadata, ProjectScanResult
from ignition_scan.models.resource import (
    ProjectResource,
    ResourceMetadata,
    ResourceOrigin,
    ResourceTypeDescriptor,
)


def _resource(**kwargs) -> ProjectResource:
    return ProjectResource(
        type="named-query",
        path="ignition/named-query/q1",
        metadata=ResourceMetadata(
            key="named-query:ignition/named-query/q1",
            name="q1",
            project_path="/projects/Base",
            **kwargs,
        ),
    )


class TestProjectResource:
    def test_defaults(self):
        resource = _resource()
        assert resource.origin == ResourceOrigin.LOCAL
        assert resource.source_project is None
        assert resource.files == []
        assert resource.key == "named-query:ignition/named-query/q1"
        assert resource.is_folder is False
        assert resource.metadata.category == "root"

    def test_as_inherited(self):
        resource = _resource(is_folder=True)
        inherited = resource.as_inherited("Base")
        assert inherited.origin == ResourceOrigin.INHERITED
        assert inherited.source_project == "Base"
        assert inherited.is_folder is True
        assert resource.origin == ResourceOrigin.LOCAL

    def test_origin_values(self):
        assert [o.value for o in ResourceOrigin] == ["local", "inherited"]


class TestDescriptor:
    def test_frozen(self):
        descriptor = ResourceTypeDescriptor(resource_type_id="x", directory_paths=["x"])
        with pytest.raises(ValidationError):
            descriptor.resource_type_id = "y"

    def test_defaults(self):
        descriptor = ResourceTypeDescriptor(resource_type_id="x")
        assert descriptor.directory_paths == []
        assert descriptor.is_singleton is False
        assert descriptor.supports_content_search is True


class TestProjectScanResult:
    def test_directory_name(self):
        result = ProjectScanResult(
            project_path="/projects/plant_dir/",
            project_name="Plant",
            metadata=ProjectMetadata(title="Plant"),
            last_scanned="2024-01-01T00:00:00+00:00",
        )
        assert result.directory_name == "plant_dir"
        assert result.inheritance_chain == []
        assert result.inherited_resources == []

    def test_metadata_frozen(self):
        with pytest.raises(ValidationError):
            ProjectMetadata(title="A").title = "B"

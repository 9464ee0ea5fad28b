"""Resource data models — type descriptors and discovered resources."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ResourceOrigin(str, Enum):
    """Where a resource in a scan result came from."""

    LOCAL = "local"
    INHERITED = "inherited"


class ResourceTypeDescriptor(BaseModel):
    """Static scan capabilities of one resource type provider."""

    model_config = ConfigDict(frozen=True)

    resource_type_id: str
    display_name: str | None = None
    directory_paths: list[str] = Field(
        default_factory=list,
        description="Paths relative to the project root that hold this type",
    )
    is_singleton: bool = False
    category: str | None = Field(
        default=None, description="Grouping label, None for top-level types",
    )
    supports_content_search: bool = True
    searchable_extensions: list[str] = Field(default_factory=list)
    primary_file: str | None = None
    category_icon: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.resource_type_id


class ResourceFile(BaseModel):
    """A plain file belonging to a resource."""

    name: str
    path: str
    size: int = 0


class ResourceMetadata(BaseModel):
    """Scanner bookkeeping attached to every resource."""

    is_folder: bool = False
    key: str
    name: str
    category: str = "root"
    project_path: str
    last_modified: int = Field(default=0, description="Epoch milliseconds")
    size: int = 0
    display_name: str | None = None
    singleton: bool = False


class ProjectResource(BaseModel):
    """A resource instance or organizational folder inside a project."""

    type: str
    path: str
    origin: ResourceOrigin = ResourceOrigin.LOCAL
    source_project: str | None = None
    files: list[ResourceFile] = Field(default_factory=list)
    metadata: ResourceMetadata

    @property
    def key(self) -> str:
        return self.metadata.key

    @property
    def is_folder(self) -> bool:
        return self.metadata.is_folder

    def as_inherited(self, source_project: str) -> ProjectResource:
        """Return a copy tagged as contributed by *source_project*."""
        return self.model_copy(
            update={
                "origin": ResourceOrigin.INHERITED,
                "source_project": source_project,
            },
        )
